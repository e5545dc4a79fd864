"""Tests for project CRUD with embedded files."""

import logging
from datetime import datetime, timezone

import pytest

from conftest import ACCOUNT_ID, OTHER_ACCOUNT_ID, make_file, stored_files
from hirehub.core.errors import FileTooLarge, InvalidFileType, NotFound, StorageError, ValidationError
from hirehub.models.profile import ProjectPlatform
from hirehub.schemas.schemas import ProjectMetadata, ProjectUpdate
from hirehub.services.project_service import infer_platform


def image(name="shot.png"):
    return make_file(name=name, content_type="image/png", size=300)


def document(name="brief.pdf"):
    return make_file(name=name, content_type="application/pdf", size=300)


@pytest.mark.parametrize(
    "link, expected",
    [
        ("https://github.com/ada/engine", ProjectPlatform.github),
        ("https://gist.github.com/ada/1", ProjectPlatform.github),
        ("www.behance.net/gallery/1", ProjectPlatform.behance),
        ("https://dribbble.com/shots/2", ProjectPlatform.dribbble),
        ("https://ada.dev/portfolio", ProjectPlatform.personal_website),
        ("https://notgithub.com/x", ProjectPlatform.personal_website),
        ("", ProjectPlatform.file_upload),
        (None, ProjectPlatform.file_upload),
    ],
)
def test_infer_platform_from_link(link, expected):
    assert infer_platform(link) == expected


def test_explicit_platform_wins():
    assert infer_platform("https://github.com/ada", ProjectPlatform.other) == ProjectPlatform.other


async def test_create_requires_file_or_link(projects, store):
    with pytest.raises(ValidationError):
        await projects.create_project(ACCOUNT_ID, ProjectMetadata(title="X"), [])

    view = await projects.create_project(ACCOUNT_ID, ProjectMetadata(title="X", project_link="https://a.com"), [])

    assert view.title == "X"
    assert view.platform == "Personal Website"
    assert view.project_link == "https://a.com"
    assert view.files == []
    assert store.puts == 0


async def test_create_requires_title(projects):
    with pytest.raises(ValidationError):
        await projects.create_project(ACCOUNT_ID, ProjectMetadata(title="   "), [image()])


async def test_create_with_files_classifies_and_resolves_urls(projects, profiles):
    view = await projects.create_project(
        ACCOUNT_ID,
        ProjectMetadata(title="Engine", description="Analytical", category="Hardware", is_featured=True),
        [image(), document()],
    )

    assert view.platform == "File Upload"
    assert view.is_featured is True
    assert [f.file_type for f in view.files] == ["Project Image", "Project Document"]
    assert all(f.url.startswith("http://testserver/uploads/projects/") for f in view.files)
    assert view.files[0].file_size == "300 B"
    assert len(profiles.find_by_account(ACCOUNT_ID).projects) == 1


async def test_create_validates_every_file_before_storing(projects, store, settings):
    too_big = make_file("huge.pdf", size=settings.project_file_max_bytes + 1)
    with pytest.raises(FileTooLarge):
        await projects.create_project(ACCOUNT_ID, ProjectMetadata(title="X"), [image(), too_big])

    with pytest.raises(InvalidFileType):
        await projects.create_project(
            ACCOUNT_ID, ProjectMetadata(title="X"), [image(), make_file("a.zip", content_type="application/zip")]
        )

    too_many = [image(f"{i}.png") for i in range(settings.max_project_files + 1)]
    with pytest.raises(ValidationError):
        await projects.create_project(ACCOUNT_ID, ProjectMetadata(title="X"), too_many)

    assert store.puts == 0


async def test_partial_store_failure_discards_written_files(projects, profiles, store):
    store.fail_put_after = 1

    with pytest.raises(StorageError):
        await projects.create_project(ACCOUNT_ID, ProjectMetadata(title="X"), [image("a.png"), image("b.png")])

    assert stored_files(store) == []
    assert profiles.find_by_account(ACCOUNT_ID).projects == []


async def test_projects_with_same_title_stay_separate(projects):
    first = await projects.create_project(ACCOUNT_ID, ProjectMetadata(title="Same"), [image()])
    second = await projects.create_project(ACCOUNT_ID, ProjectMetadata(title="Same"), [document()])

    listed = await projects.list_projects(ACCOUNT_ID)

    assert first.id != second.id
    assert {p.id for p in listed} == {first.id, second.id}
    assert [len(p.files) for p in listed] == [1, 1]


async def test_list_projects_newest_first(projects, profiles):
    older = await projects.create_project(ACCOUNT_ID, ProjectMetadata(title="Older"), [image()])
    newer = await projects.create_project(ACCOUNT_ID, ProjectMetadata(title="Newer"), [image()])

    # pin timestamps so ordering does not depend on clock resolution
    profile = profiles.docs[ACCOUNT_ID]
    profile.projects[0].created_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
    profile.projects[1].created_at = datetime(2024, 6, 1, tzinfo=timezone.utc)

    listed = await projects.list_projects(ACCOUNT_ID)

    assert [p.id for p in listed] == [newer.id, older.id]


async def test_list_projects_without_profile_is_empty(projects):
    assert await projects.list_projects(ACCOUNT_ID) == []


async def test_update_is_partial_and_leaves_files(projects):
    created = await projects.create_project(
        ACCOUNT_ID, ProjectMetadata(title="Engine", description="Old", category="Hardware"), [image()]
    )

    updated = await projects.update_project(
        ACCOUNT_ID, created.id, ProjectUpdate(description="New", is_featured=True)
    )

    assert updated.title == "Engine"
    assert updated.description == "New"
    assert updated.category == "Hardware"
    assert updated.is_featured is True
    assert [f.id for f in updated.files] == [f.id for f in created.files]


async def test_update_platform_and_link(projects):
    created = await projects.create_project(ACCOUNT_ID, ProjectMetadata(title="Engine"), [image()])

    explicit = await projects.update_project(
        ACCOUNT_ID, created.id, ProjectUpdate(project_link="https://github.com/ada", platform=ProjectPlatform.other)
    )
    assert explicit.platform == "Other"
    assert explicit.project_link == "https://github.com/ada"

    inferred = await projects.update_project(ACCOUNT_ID, created.id, ProjectUpdate.model_validate({"platform": None}))
    assert inferred.platform == "GitHub"


async def test_update_rejects_empty_title(projects):
    created = await projects.create_project(ACCOUNT_ID, ProjectMetadata(title="Engine"), [image()])

    with pytest.raises(ValidationError):
        await projects.update_project(ACCOUNT_ID, created.id, ProjectUpdate(title=" "))


async def test_update_unknown_project_is_not_found(projects):
    await projects.create_project(ACCOUNT_ID, ProjectMetadata(title="Engine"), [image()])

    with pytest.raises(NotFound):
        await projects.update_project(ACCOUNT_ID, "project_missing", ProjectUpdate(title="Y"))


async def test_add_files_appends(projects, store):
    created = await projects.create_project(ACCOUNT_ID, ProjectMetadata(title="Engine"), [image("a.png")])

    updated = await projects.add_files_to_project(ACCOUNT_ID, created.id, [document("b.pdf"), image("c.png")])

    assert [f.file_name for f in updated.files] == ["a.png", "b.pdf", "c.png"]
    assert len(stored_files(store)) == 3


async def test_add_files_to_other_accounts_project_stores_nothing(projects, store):
    theirs = await projects.create_project(OTHER_ACCOUNT_ID, ProjectMetadata(title="Theirs"), [image()])
    await projects.create_project(ACCOUNT_ID, ProjectMetadata(title="Mine"), [image()])
    puts_before = store.puts

    with pytest.raises(NotFound):
        await projects.add_files_to_project(ACCOUNT_ID, theirs.id, [document()])

    assert store.puts == puts_before


async def test_delete_file_keeps_project_even_when_empty(projects, store):
    created = await projects.create_project(ACCOUNT_ID, ProjectMetadata(title="Engine"), [image()])
    file_id = created.files[0].id

    await projects.delete_project_file(ACCOUNT_ID, created.id, file_id)

    project = await projects.get_project(ACCOUNT_ID, created.id)
    assert project.files == []
    assert stored_files(store) == []

    with pytest.raises(NotFound):
        await projects.delete_project_file(ACCOUNT_ID, created.id, file_id)


async def test_delete_project_attempts_every_file(projects, store, caplog):
    created = await projects.create_project(
        ACCOUNT_ID, ProjectMetadata(title="Engine"), [image("a.png"), image("b.png"), document("c.pdf")]
    )
    store.fail_delete = True

    with caplog.at_level(logging.WARNING, logger="hirehub.services.asset_manager"):
        await projects.delete_project(ACCOUNT_ID, created.id)

    assert await projects.list_projects(ACCOUNT_ID) == []
    assert caplog.text.count("SyncWarning") == 3

    with pytest.raises(NotFound):
        await projects.get_project(ACCOUNT_ID, created.id)


async def test_delete_project_removes_objects(projects, store):
    created = await projects.create_project(ACCOUNT_ID, ProjectMetadata(title="Engine"), [image(), document()])

    await projects.delete_project(ACCOUNT_ID, created.id)

    assert stored_files(store) == []
