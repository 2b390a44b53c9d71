from fastapi import APIRouter, Depends

from auth import get_current_user, get_movies, get_users
from errors import NotFoundError
from schemas import ProfileOut, ProfileStats, ProfileUser, User, WatchlistWithCount
from storage import MovieStore, UserStore

router = APIRouter(prefix='/api/user', tags=['profile'])


@router.get('/profile', response_model=ProfileOut)
async def get_profile(current: User = Depends(get_current_user),
                      users: UserStore = Depends(get_users),
                      movies: MovieStore = Depends(get_movies)):
    user = await users.get_user(current.id)
    if user is None:
        raise NotFoundError('User not found')
    favorites = await movies.get_saved_movies(user.id, 'favorites')
    watchlists = [
        WatchlistWithCount(**w.model_dump(), movie_count=await movies.count_watchlist_movies(w.id))
        for w in await movies.get_user_watchlists(user.id)
    ]
    return ProfileOut(
        user=ProfileUser(id=user.id, username=user.username, email=user.email, name=user.name,
                         created_at=user.created_at),
        favorites=favorites,
        watchlists=watchlists,
        stats=ProfileStats(favorite_count=len(favorites), watchlist_count=len(watchlists)),
    )
