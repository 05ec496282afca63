"""
Game error taxonomy
Erros do jogo - cada tipo tem uma mensagem curta para o jogador
"""

from typing import Optional


class GameError(Exception):
    """Base class for every error a game operation can surface to a caller"""

    kind = "GameError"
    status_code = 400
    default_message = "Erro inesperado"

    def __init__(self, message: Optional[str] = None, **context):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def __repr__(self):
        return f"<{self.kind}(message={self.message!r}, context={self.context})>"


class NotHost(GameError):
    kind = "NotHost"
    status_code = 403
    default_message = "Apenas o host pode fazer isso"


class InsufficientPlayers(GameError):
    kind = "InsufficientPlayers"
    default_message = "Jogadores insuficientes. São necessários pelo menos 3 jogadores"


class InvalidImpostorCount(GameError):
    kind = "InvalidImpostorCount"
    default_message = "O número de impostores deve ser pelo menos 1 e menor que o número de jogadores"


class NoWordsAvailable(GameError):
    kind = "NoWordsAvailable"
    status_code = 409
    default_message = "Nenhuma palavra disponível para esta categoria"


class CannotRemoveSelf(GameError):
    kind = "CannotRemoveSelf"
    default_message = "Você não pode remover a si mesmo"


class AlreadyHost(GameError):
    kind = "AlreadyHost"
    default_message = "Você já é o host"


class CodeGenerationExhausted(GameError):
    kind = "CodeGenerationExhausted"
    status_code = 503
    default_message = "Não foi possível gerar um código de sala único"


class BackendUnavailable(GameError):
    """The row store did not answer in time. Retry the whole operation."""

    kind = "BackendUnavailable"
    status_code = 503
    default_message = "Servidor indisponível, tente novamente"


class PartialRoundUpdate(GameError):
    """Some writes were committed before a later one failed."""

    kind = "PartialRoundUpdate"
    status_code = 503
    default_message = "A operação foi aplicada parcialmente, tente novamente"


class RoundConflict(GameError):
    """Another round transition for the same room committed first."""

    kind = "RoundConflict"
    status_code = 409
    default_message = "A rodada já foi alterada por outra ação"


class RoundInProgress(GameError):
    """The change is only allowed while the room is in the lobby."""

    kind = "RoundInProgress"
    status_code = 409
    default_message = "Não é possível alterar isso durante a partida"


class RoomNotFound(GameError):
    kind = "RoomNotFound"
    status_code = 404
    default_message = "Sala não encontrada"


class PlayerNotFound(GameError):
    kind = "PlayerNotFound"
    status_code = 404
    default_message = "Jogador não encontrado"


class RoomFull(GameError):
    kind = "RoomFull"
    status_code = 409
    default_message = "A sala está cheia"


class InvalidPlayerName(GameError):
    kind = "InvalidPlayerName"
    status_code = 422
    default_message = "Nome inválido"


class WordNotReady(GameError):
    """
    No word row is visible yet for the requested round.

    Clients should retry with backoff: the round may still be propagating,
    or the player joined after the round was dealt.
    """

    kind = "WordNotReady"
    status_code = 404
    default_message = "Palavra ainda não disponível"


class InvariantViolation(GameError):
    """A defect, never a runtime condition to tolerate"""

    kind = "InvariantViolation"
    status_code = 500
    default_message = "Erro interno"


class DuplicateAssignment(InvariantViolation):
    kind = "DuplicateAssignment"
    default_message = "Jogadores duplicados detectados na distribuição de palavras"


class ImpostorCountMismatch(InvariantViolation):
    kind = "ImpostorCountMismatch"
    default_message = "Número de impostores sorteados incorreto"
