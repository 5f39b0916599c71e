import pytest

from app.services.articles.article import ArticleService
from app.services.articles.errors import ArticleValidationError
from app.services.articles.manager import ArticleForm, ArticleManager, ManagerView
from tests.factories import create_article, drop_tables


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def manager(session_factory, author, clock):
    return ArticleManager(session_factory, author.id, clock=clock, message_ttl=5)


def test_form_validation():
    with pytest.raises(ArticleValidationError) as exc:
        ArticleForm(title="   ", content="<p>x</p>").validate()
    assert exc.value.field == "title"

    with pytest.raises(ArticleValidationError) as exc:
        ArticleForm(title="T", content="<p></p>").validate()
    assert exc.value.field == "content"

    ArticleForm(title="T", content="<p>x</p>").validate()


def test_form_tags_split():
    form = ArticleForm(tags=" a, ,b ,c,")
    assert form.split_tags() == ["a", "b", "c"]
    assert form.to_input().tags == ["a", "b", "c"]


async def test_load_fetches_articles_and_stats(session_factory, manager):
    await create_article(session_factory, title="one", status="published", views=4)
    await create_article(session_factory, title="two")

    assert manager.loading is True
    await manager.load()
    assert manager.loading is False
    assert [a.title for a in manager.articles] == ["two", "one"]
    assert manager.stats.total == 2
    assert manager.stats.total_views == 4
    assert manager.message is None


async def test_load_failure_sets_error(engine, manager):
    await drop_tables(engine)
    await manager.load()
    assert manager.loading is False
    assert manager.articles == []
    assert manager.message.type == "error"


async def test_submit_blocked_by_validation(session_factory, manager):
    manager.start_create()
    manager.form.title = "Title"
    manager.form.content = "<p></p>"

    assert await manager.submit() is False
    assert manager.message.type == "error"
    assert manager.message.text == "正文不能为空"
    assert manager.view == ManagerView.CREATE

    async with session_factory() as session:
        result = await ArticleService.list_all(session)
    assert result.data == []


async def test_submit_create(manager, author):
    await manager.load()
    manager.start_create()
    assert manager.view == ManagerView.CREATE
    manager.form.title = "New article"
    manager.form.content = "<p>body</p>"
    manager.form.tags = "x, y"

    assert await manager.submit() is True
    assert manager.view == ManagerView.LIST
    assert manager.saving is False
    assert manager.message.text == "文章已创建"
    assert manager.form == ArticleForm()
    assert len(manager.articles) == 1
    assert manager.articles[0].author_id == author.id
    assert manager.articles[0].tags == ["x", "y"]
    assert manager.stats.draft == 1


async def test_edit_round_trip_keeps_tags(session_factory, manager):
    created = await create_article(session_factory, title="Tagged", tags=["a", "b"])

    assert await manager.start_edit(created.id) is True
    assert manager.view == ManagerView.EDIT
    assert manager.form.tags == "a, b"

    assert await manager.submit() is True
    assert manager.message.text == "文章已更新"

    async with session_factory() as session:
        stored = await ArticleService.get_by_id(session, created.id)
    assert stored.data.tags == ["a", "b"]
    assert stored.data.slug == created.slug


async def test_start_edit_missing_returns_to_list(manager):
    manager.start_create()
    assert await manager.start_edit(404) is False
    assert manager.view == ManagerView.LIST
    assert manager.editing is None
    assert manager.message.type == "error"


async def test_cancel_resets_form(session_factory, manager):
    created = await create_article(session_factory, title="Edit me")
    await manager.start_edit(created.id)
    manager.cancel()
    assert manager.view == ManagerView.LIST
    assert manager.editing is None
    assert manager.form == ArticleForm()


async def test_delete(session_factory, manager):
    created = await create_article(session_factory)
    await manager.load()

    assert await manager.delete(created.id) is True
    assert manager.message.text == "文章已删除"
    assert manager.articles == []

    assert await manager.delete(created.id) is False
    assert manager.message.text == "删除文章失败"


async def test_message_expires(manager, clock):
    await manager.delete(999)
    assert manager.message is not None

    clock.now += 4.9
    assert manager.message is not None
    clock.now += 0.2
    assert manager.message is None


async def test_filters(session_factory, manager):
    await create_article(session_factory, title="Python basics", status="published", category="lang")
    await create_article(session_factory, title="Web intro", status="draft", category="python-web")
    await create_article(session_factory, title="Old notes", status="archived")
    await manager.load()

    manager.search_query = "PYTHON"
    assert {a.title for a in manager.filtered_articles} == {"Python basics", "Web intro"}

    manager.set_status_filter("draft")
    assert [a.title for a in manager.filtered_articles] == ["Web intro"]

    manager.search_query = ""
    manager.set_status_filter("all")
    assert len(manager.filtered_articles) == 3

    with pytest.raises(ValueError):
        manager.set_status_filter("deleted")


async def test_submit_strips_title(manager):
    manager.start_create()
    manager.form.title = "  Padded title  "
    manager.form.content = "<p>body</p>"

    assert await manager.submit() is True
    assert manager.articles[0].title == "Padded title"
