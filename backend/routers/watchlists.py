from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, status

from auth import get_current_user, get_movies, get_optional_user
from errors import AuthorizationError, NotFoundError, ValidationError
from models import MAX_ID
from schemas import (AddToWatchlistIn, CreateWatchlistIn, MessageOut, User, UserWatchlist, WatchlistDetail,
                     WatchlistMovie, parse_body)
from storage import MovieStore

router = APIRouter(prefix='/api/watchlists', tags=['watchlists'])


def _parse_id(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError('Invalid watchlist ID')
    if not -MAX_ID <= value <= MAX_ID:
        raise ValidationError('Invalid watchlist ID')
    return value


async def _owned_watchlist(movies: MovieStore, watchlist_id: int, user: User) -> UserWatchlist:
    watchlist = await movies.get_watchlist(watchlist_id)
    if watchlist is None or watchlist.user_id != user.id:
        raise AuthorizationError('Access denied')
    return watchlist


@router.post('', response_model=UserWatchlist, status_code=status.HTTP_201_CREATED)
async def create_watchlist(payload: Any = Body(default=None),
                           user: User = Depends(get_current_user),
                           movies: MovieStore = Depends(get_movies)):
    data = parse_body(CreateWatchlistIn, payload, 'Invalid watchlist data')
    return await movies.create_watchlist(user.id, data.name, description=data.description,
                                         is_public=data.is_public)


@router.get('', response_model=List[UserWatchlist])
async def list_watchlists(user: User = Depends(get_current_user), movies: MovieStore = Depends(get_movies)):
    return await movies.get_user_watchlists(user.id)


@router.get('/{watchlist_id}', response_model=WatchlistDetail)
async def get_watchlist(watchlist_id: str,
                        user: Optional[User] = Depends(get_optional_user),
                        movies: MovieStore = Depends(get_movies)):
    wid = _parse_id(watchlist_id)
    watchlist = await movies.get_watchlist(wid)
    if watchlist is None:
        raise NotFoundError('Watchlist not found')
    if not watchlist.is_public and (user is None or watchlist.user_id != user.id):
        raise AuthorizationError('Access denied')
    items = await movies.get_watchlist_movies(wid)
    return WatchlistDetail(**watchlist.model_dump(), movies=items)


@router.delete('/{watchlist_id}', response_model=MessageOut)
async def delete_watchlist(watchlist_id: str,
                           user: User = Depends(get_current_user),
                           movies: MovieStore = Depends(get_movies)):
    if not await movies.delete_watchlist(_parse_id(watchlist_id), user.id):
        raise NotFoundError('Watchlist not found')
    return {'message': 'Watchlist deleted successfully'}


@router.post('/{watchlist_id}/movies', response_model=WatchlistMovie, status_code=status.HTTP_201_CREATED)
async def add_movie(watchlist_id: str,
                    payload: Any = Body(default=None),
                    user: User = Depends(get_current_user),
                    movies: MovieStore = Depends(get_movies)):
    wid = _parse_id(watchlist_id)
    data = parse_body(AddToWatchlistIn, payload, 'Invalid movie data')
    await _owned_watchlist(movies, wid, user)
    return await movies.add_movie_to_watchlist(
        wid, data.movie_id, data.title, poster_path=data.poster_path,
        release_date=data.release_date, overview=data.overview,
    )


@router.delete('/{watchlist_id}/movies/{movie_id}', response_model=MessageOut)
async def remove_movie(watchlist_id: str, movie_id: str,
                       user: User = Depends(get_current_user),
                       movies: MovieStore = Depends(get_movies)):
    wid = _parse_id(watchlist_id)
    await _owned_watchlist(movies, wid, user)
    if not await movies.remove_movie_from_watchlist(wid, movie_id):
        raise NotFoundError('Movie not found in watchlist')
    return {'message': 'Movie removed from watchlist'}
