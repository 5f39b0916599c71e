"""测试用的数据构造工具"""

from sqlalchemy import update

from app.models import Article, Base
from app.schemas.articles import ArticleInput
from app.services.articles.article import ArticleService


def make_input(title="Intro to Python", content="<p>hello</p>", **kwargs) -> ArticleInput:
    return ArticleInput(title=title, content=content, **kwargs)


async def create_article(session_factory, author_id=None, views=None, **kwargs):
    async with session_factory() as session:
        result = await ArticleService.create(session, make_input(**kwargs), author_id)
        assert result.ok, result.error
        if views is not None:
            await session.execute(update(Article).where(Article.id == result.data.id).values(views=views))
            await session.commit()
        return result.data


async def drop_tables(engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
