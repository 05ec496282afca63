"""Initial game schema

Revision ID: 001
Revises:
Create Date: 2026-10-17 10:00:00.000000

Tables:
- rooms: game sessions, current round and its word pair
- players: room members, one host per room
- player_words: words dealt to each player in the current round
- word_pairs: crewmate/impostor word catalog
- room_word_history: pairs recently dealt in each room
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table('rooms',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('code', sa.String(8), nullable=False),
        sa.Column('host_player_id', sa.String(36), nullable=True),
        sa.Column('status', sa.Enum('lobby', 'in_progress', name='roomstatus'),
                  nullable=False, server_default='lobby'),
        sa.Column('round_number', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('word', sa.String(100), nullable=True),
        sa.Column('impostor_word', sa.String(100), nullable=True),
        sa.Column('num_impostors', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('game_mode', sa.Enum('normal', 'anonymous', name='gamemode'),
                  nullable=False, server_default='normal'),
        sa.Column('word_category', sa.Enum(
            'all', 'agua', 'veiculos', 'casa', 'animais', 'natureza', 'tecnologia',
            'corpo', 'comida', 'espaco', 'livros', 'musica', 'esportes',
            name='wordcategory'), nullable=False, server_default='all'),
        sa.Column('starting_player_id', sa.String(36), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True),
                  server_default=sa.text('CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        mysql_engine='InnoDB',
        mysql_charset='utf8mb4',
        mysql_collate='utf8mb4_unicode_ci'
    )
    op.create_index('ix_rooms_id', 'rooms', ['id'])
    op.create_index('ix_rooms_code', 'rooms', ['code'], unique=True)

    op.create_table('players',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('room_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(20), nullable=False),
        sa.Column('is_host', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('joined_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['room_id'], ['rooms.id'], ondelete='CASCADE'),
        mysql_engine='InnoDB',
        mysql_charset='utf8mb4',
        mysql_collate='utf8mb4_unicode_ci'
    )
    op.create_index('ix_players_id', 'players', ['id'])
    op.create_index('ix_players_room_id', 'players', ['room_id'])

    op.create_table('player_words',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('room_id', sa.String(36), nullable=False),
        sa.Column('round_number', sa.Integer(), nullable=False),
        sa.Column('player_id', sa.String(36), nullable=False),
        sa.Column('word', sa.String(100), nullable=False),
        sa.Column('is_impostor', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('room_id', 'round_number', 'player_id', name='uq_player_words_round_player'),
        mysql_engine='InnoDB',
        mysql_charset='utf8mb4',
        mysql_collate='utf8mb4_unicode_ci'
    )
    op.create_index('ix_player_words_room_id', 'player_words', ['room_id'])
    op.create_index('ix_player_words_room_round', 'player_words', ['room_id', 'round_number'])

    op.create_table('word_pairs',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('crewmate_word', sa.String(50), nullable=False),
        sa.Column('impostor_word', sa.String(50), nullable=False),
        sa.Column('category', sa.String(20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        mysql_engine='InnoDB',
        mysql_charset='utf8mb4',
        mysql_collate='utf8mb4_unicode_ci'
    )
    op.create_index('ix_word_pairs_id', 'word_pairs', ['id'])
    op.create_index('ix_word_pairs_category', 'word_pairs', ['category'])

    op.create_table('room_word_history',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('room_id', sa.String(36), nullable=False),
        sa.Column('round_number', sa.Integer(), nullable=False),
        sa.Column('word_pair_id', sa.String(36), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        mysql_engine='InnoDB',
        mysql_charset='utf8mb4',
        mysql_collate='utf8mb4_unicode_ci'
    )
    op.create_index('ix_room_word_history_room_round', 'room_word_history', ['room_id', 'round_number'])


def downgrade() -> None:
    op.drop_index('ix_room_word_history_room_round', table_name='room_word_history')
    op.drop_table('room_word_history')

    op.drop_index('ix_word_pairs_category', table_name='word_pairs')
    op.drop_index('ix_word_pairs_id', table_name='word_pairs')
    op.drop_table('word_pairs')

    op.drop_index('ix_player_words_room_round', table_name='player_words')
    op.drop_index('ix_player_words_room_id', table_name='player_words')
    op.drop_table('player_words')

    op.drop_index('ix_players_room_id', table_name='players')
    op.drop_index('ix_players_id', table_name='players')
    op.drop_table('players')

    op.drop_index('ix_rooms_code', table_name='rooms')
    op.drop_index('ix_rooms_id', table_name='rooms')
    op.drop_table('rooms')
