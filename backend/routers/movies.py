from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from auth import get_catalog, get_current_user, get_movies
from catalog import CatalogClient
from errors import ConflictError, NotFoundError, ValidationError
from models import LIST_TYPES
from schemas import MessageOut, SavedMovie, SaveMovieIn, User, parse_body
from storage import MovieStore

router = APIRouter(prefix='/api/movies', tags=['movies'])


def list_type_param(list_type: str = Query('favorites', alias='listType')) -> str:
    if list_type not in LIST_TYPES:
        raise ValidationError('Invalid list type', errors=[
            {'path': 'listType', 'message': f"Must be one of: {', '.join(LIST_TYPES)}"},
        ])
    return list_type


@router.get('/search')
async def search_movies(q: Optional[str] = None, genre: Optional[str] = None, year: Optional[str] = None,
                        page: int = Query(1, ge=1), catalog: CatalogClient = Depends(get_catalog)):
    return await catalog.search(query=q, genre=genre, year=year, page=page)


@router.get('/genres')
async def list_genres(catalog: CatalogClient = Depends(get_catalog)):
    return await catalog.genres()


@router.post('/save', response_model=SavedMovie, status_code=status.HTTP_201_CREATED)
async def save_movie(payload: Any = Body(default=None),
                     user: User = Depends(get_current_user),
                     movies: MovieStore = Depends(get_movies)):
    data = parse_body(SaveMovieIn, payload, 'Invalid movie data')
    if await movies.is_movie_saved(user.id, data.movie_id, data.list_type):
        raise ConflictError('Movie already saved')
    return await movies.save_movie(
        user.id, data.movie_id, data.title, poster_path=data.poster_path, release_date=data.release_date,
        overview=data.overview, rating=data.rating, list_type=data.list_type,
    )


@router.get('/saved', response_model=List[SavedMovie])
async def list_saved_movies(list_type: str = Depends(list_type_param),
                            user: User = Depends(get_current_user),
                            movies: MovieStore = Depends(get_movies)):
    return await movies.get_saved_movies(user.id, list_type)


@router.delete('/saved/{movie_id}', response_model=MessageOut)
async def remove_saved_movie(movie_id: str,
                             list_type: str = Depends(list_type_param),
                             user: User = Depends(get_current_user),
                             movies: MovieStore = Depends(get_movies)):
    if not await movies.remove_saved_movie(user.id, movie_id, list_type):
        raise NotFoundError('Movie not found in saved list')
    return {'message': 'Movie removed from saved list'}
