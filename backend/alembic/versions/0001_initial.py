
from alembic import op
import sqlalchemy as sa

revision = '0001_initial'
down_revision = None

def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(), nullable=False, unique=True),
        sa.Column('email', sa.String(), nullable=False, unique=True),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('role', sa.String(), nullable=False, server_default='user'),
        sa.Column('status', sa.String(), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_table('saved_movies',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), nullable=False, index=True),
        sa.Column('movie_id', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('poster_path', sa.String(), nullable=True),
        sa.Column('release_date', sa.String(), nullable=True),
        sa.Column('overview', sa.Text(), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('list_type', sa.String(), nullable=False, server_default='favorites'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('user_id', 'movie_id', 'list_type', name='uq_saved_movies_user_movie_list'),
    )
    op.create_table('user_watchlists',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), nullable=False, index=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_table('watchlist_movies',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('watchlist_id', sa.Integer(), nullable=False, index=True),
        sa.Column('movie_id', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('poster_path', sa.String(), nullable=True),
        sa.Column('release_date', sa.String(), nullable=True),
        sa.Column('overview', sa.Text(), nullable=True),
        sa.Column('added_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('watchlist_id', 'movie_id', name='uq_watchlist_movies_watchlist_movie'),
    )
    op.create_table('activities',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('message', sa.String(), nullable=False),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_table('system_stats',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('total_users', sa.Integer(), nullable=False),
        sa.Column('api_requests', sa.Integer(), nullable=False),
        sa.Column('collections', sa.Integer(), nullable=False),
        sa.Column('uptime', sa.String(), nullable=False),
        sa.Column('cpu_usage', sa.Integer(), nullable=False),
        sa.Column('memory_usage', sa.Integer(), nullable=False),
        sa.Column('storage_usage', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

def downgrade():
    op.drop_table('system_stats')
    op.drop_table('activities')
    op.drop_table('watchlist_movies')
    op.drop_table('user_watchlists')
    op.drop_table('saved_movies')
    op.drop_table('users')
