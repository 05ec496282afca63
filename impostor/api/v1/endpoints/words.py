"""
Word catalog API endpoints
Endpoints do catálogo de palavras
"""

from fastapi import APIRouter, Depends

from impostor.api.deps import get_word_pair_source
from impostor.schemas.word_pair import CategoryListResponse
from impostor.services.word_pairs import WordPairSource

router = APIRouter()


@router.get("/categories", response_model=CategoryListResponse)
async def list_categories(source: WordPairSource = Depends(get_word_pair_source)):
    """Categorias disponíveis e quantidade de pares em cada uma"""
    categories = await source.category_counts()
    return CategoryListResponse(
        categories=categories,
        total=sum(c.count for c in categories),
    )
