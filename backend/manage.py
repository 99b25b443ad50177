import asyncio
import typer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

import app.db_models # noqa: F401

from app.database import Base, dispose_engine, get_engine, get_session_factory
from app.articles.models import Article
from app.articles.utils import encode_tags
from app.users.models import User as UserModel, UserRole
from app.users.schema import UserCreate
from app.users.service import create_user, get_user_by_email

cli = typer.Typer()

SAMPLE_ARTICLE = {
    "title": "Getting Started with Our Blog",
    "slug": "getting-started-with-our-blog",
    "excerpt": "Welcome to our blog platform! Learn how to create and manage your articles.",
    "content": (
        "<p>Welcome to our blog platform! This article will help you get started "
        "with creating and managing your content.</p>"
        "<h2>Creating Your First Article</h2>"
        "<p>Open the admin dashboard, go to Articles and click \"New Article\".</p>"
        "<h2>Managing Articles</h2>"
        "<p>From the articles list you can edit or delete any article, or toggle "
        "its published status to control visibility on the public blog.</p>"
    ),
    "cover_image": "https://images.unsplash.com/photo-1499750310107-5fef28a66643?w=800",
    "published": True,
    "read_time": "3 min read",
}


def _run(coro):
    async def main():
        try:
            await coro
        finally:
            await dispose_engine()

    asyncio.run(main())


async def create_tables() -> None:
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ensure_user(db: AsyncSession, *, name: str, email: str, password: str, role: UserRole) -> UserModel:
    """Create the user unless the email is already registered."""
    user = await get_user_by_email(email, db)
    if user:
        typer.echo(f"   {email} already exists (role={user.role}), skipping")
        return user
    user = await create_user(UserCreate(name=name, email=email, password=password), db, role=role)
    typer.echo(f"   Created {role.value}: {user.email} (id={user.id})")
    return user


@cli.command(name="init-db")
def init_db():
    """
    Create all tables directly from the models (development shortcut for `alembic upgrade head`).
    """
    _run(create_tables())
    typer.echo("Tables created.")


@cli.command(name="create-superadmin")
def create_superadmin(
    name: str = typer.Option(..., "--name", "-n", help="Superadmin's display name."),
    email: str = typer.Option(..., "--email", "-e", help="Superadmin's email address."),
    password: str = typer.Option(..., "--password", "-p", help="Superadmin's password (min 8 chars)."),
):
    """
    Creates a user with 'superadmin' privileges in the database.
    """
    async def runner():
        async with get_session_factory()() as session:
            await ensure_user(session, name=name, email=email, password=password, role=UserRole.SUPERADMIN)

    _run(runner())


@cli.command()
def seed(
    superadmin_password: str = typer.Option("superadmin123", help="Password for superadmin@example.com"),
    admin_password: str = typer.Option("admin123", help="Password for admin@example.com"),
):
    """
    Seed a superadmin, an admin and one published sample article. Safe to re-run.
    """
    async def runner():
        await create_tables()
        async with get_session_factory()() as session:
            await ensure_user(
                session, name="Super Admin", email="superadmin@example.com",
                password=superadmin_password, role=UserRole.SUPERADMIN,
            )
            admin = await ensure_user(
                session, name="Admin User", email="admin@example.com",
                password=admin_password, role=UserRole.ADMIN,
            )

            existing = (
                await session.execute(select(Article.id).where(Article.slug == SAMPLE_ARTICLE["slug"]))
            ).scalar_one_or_none()
            if existing:
                typer.echo("   Sample article already exists, skipping")
                return
            session.add(Article(**SAMPLE_ARTICLE, tags=encode_tags(["getting-started", "tutorial"]), author_id=admin.id))
            await session.commit()
            typer.echo(f"   Created sample article: {SAMPLE_ARTICLE['title']}")

    _run(runner())


if __name__ == "__main__":
    cli()
