"""Tests for staged entity creation and immediate edit-mode uploads."""
import asyncio
from unittest.mock import AsyncMock

import pytest

from showcase.dashboard.errors import EntityMutationError, SelectionError, TransportError
from showcase.dashboard.forms import SITE_SETTINGS_SLOTS, AssetForm, AssetSlot, FormState

PROJECT_SLOTS = [
    AssetSlot("image", "featured_image", label="featured image"),
    AssetSlot("card-image", "card_image", mirror_of="image", label="card image"),
    AssetSlot("banner-image", "banner_image", label="banner image"),
]

BRAND_SLOTS = [AssetSlot("logo", "logo")]


@pytest.fixture
def make_form(entity_api, gateway, transport, previews, notifier):
    def _make(entity_type="project", slots=PROJECT_SLOTS, **kwargs):
        return AssetForm(
            entity_type,
            slots,
            entity_api=entity_api,
            gateway=gateway,
            transport=transport,
            previews=previews,
            notifier=notifier,
            **kwargs,
        )
    return _make


class TestCreateMode:
    @pytest.mark.asyncio
    async def test_create_failure_makes_no_upload_requests(self, make_form, make_file, entity_api, gateway, notifier):
        entity_api.fail_create = True
        form = make_form()
        await form.select("image", make_file("featured.png"))

        outcome = await form.submit({"title": "Atlas"})

        assert isinstance(outcome.error, EntityMutationError)
        assert outcome.entity_id is None
        assert gateway.calls == []
        assert entity_api.patches == []
        assert form.state == FormState.COMPOSING
        assert "image" in form.pending
        assert [n.message for n in notifier.errors()] == [
            "Failed to create project: Project with this slug already exists"
        ]

    @pytest.mark.asyncio
    async def test_featured_image_reused_as_card_image(self, make_form, make_file, entity_api, gateway, previews):
        form = make_form()
        assert form.reuse["card-image"] is True

        await form.select("image", make_file("featured.png"))
        await form.select("banner-image", make_file("banner.png"))
        outcome = await form.submit({"title": "Atlas"})

        entity_id = outcome.entity_id
        featured = f"https://cdn.test/uploads/project/{entity_id}/image/featured.png"
        banner = f"https://cdn.test/uploads/project/{entity_id}/banner-image/banner.png"

        assert sorted(call[2] for call in gateway.calls) == ["banner-image", "image"]
        assert entity_api.patches == [
            ("project", entity_id, {"featured_image": featured, "card_image": featured, "banner_image": banner})
        ]
        assert outcome.patched is True
        assert outcome.ok
        assert form.state == FormState.DONE
        assert len(previews) == 0
        assert len(form.pending) == 0

    @pytest.mark.asyncio
    async def test_patch_carries_only_successful_uploads(self, make_form, make_file, entity_api, transport, notifier):
        transport.fail_names.add("banner.png")
        form = make_form()
        await form.select("image", make_file("featured.png"))
        await form.select("banner-image", make_file("banner.png"))

        outcome = await form.submit({"title": "Atlas"})

        assert set(outcome.uploaded) == {"image"}
        assert isinstance(outcome.failed["banner-image"], TransportError)
        assert len(entity_api.patches) == 1
        _, _, fields = entity_api.patches[0]
        assert set(fields) == {"featured_image", "card_image"}
        assert outcome.entity is not None
        assert not outcome.ok

        errors = notifier.errors()
        assert len(errors) == 1
        assert errors[0].field == "banner_image"
        assert notifier.history[-1].level == "success"

    @pytest.mark.asyncio
    async def test_no_patch_when_every_upload_fails(self, make_form, make_file, entity_api, gateway):
        gateway.fail_intents.update({"image", "banner-image"})
        form = make_form()
        await form.select("image", make_file("featured.png"))
        await form.select("banner-image", make_file("banner.png"))

        outcome = await form.submit({"title": "Atlas"})

        assert outcome.entity_id is not None
        assert set(outcome.failed) == {"image", "banner-image"}
        assert entity_api.patches == []
        assert outcome.patched is False

    @pytest.mark.asyncio
    async def test_no_staged_files_means_no_gateway_or_patch(self, make_form, entity_api, gateway):
        form = make_form()

        outcome = await form.submit({"title": "Atlas"})

        assert outcome.ok
        assert gateway.calls == []
        assert entity_api.patches == []
        assert len(entity_api.created) == 1

    @pytest.mark.asyncio
    async def test_create_request_omits_asset_fields(self, make_form, entity_api):
        form = make_form()

        await form.submit({"title": "Atlas", "featured_image": "https://elsewhere.test/x.png"})

        assert entity_api.created == [("project", {"title": "Atlas"})]

    @pytest.mark.asyncio
    async def test_sequential_uploads(self, make_form, make_file, gateway, entity_api):
        form = make_form(parallel_uploads=False)
        await form.select("banner-image", make_file("banner.png"))
        await form.select("image", make_file("featured.png"))

        outcome = await form.submit({"title": "Atlas"})

        assert [call[2] for call in gateway.calls] == ["banner-image", "image"]
        assert len(entity_api.patches) == 1
        assert outcome.ok

    @pytest.mark.asyncio
    async def test_patch_failure_is_its_own_outcome(self, make_form, make_file, entity_api, notifier):
        entity_api.fail_patch = True
        form = make_form()
        await form.select("image", make_file("featured.png"))

        outcome = await form.submit({"title": "Atlas"})

        assert outcome.entity_id is not None
        assert outcome.error is None
        assert isinstance(outcome.patch_error, EntityMutationError)
        assert set(form.unattached) == {"featured_image", "card_image"}
        assert any("could not be saved" in n.message for n in notifier.errors())

    @pytest.mark.asyncio
    async def test_retry_after_patch_failure_patches_the_created_entity(self, make_form, make_file, entity_api, gateway):
        entity_api.fail_patch = True
        form = make_form()
        await form.select("image", make_file("featured.png"))
        first = await form.submit({"title": "Atlas"})
        featured = f"https://cdn.test/uploads/project/{first.entity_id}/image/featured.png"

        entity_api.fail_patch = False
        retry = await form.submit({"title": "Atlas"})

        assert form.editing
        assert len(entity_api.created) == 1
        assert len(gateway.calls) == 1
        assert entity_api.patches[-1] == (
            "project",
            first.entity_id,
            {"title": "Atlas", "featured_image": featured, "card_image": featured},
        )
        assert retry.patched is True
        assert retry.entity_id == first.entity_id
        assert form.unattached == {}
        assert form.values["featured_image"] == featured

    @pytest.mark.asyncio
    async def test_file_chosen_after_creation_uploads_immediately(self, make_form, make_file, entity_api, gateway):
        form = make_form("brand", BRAND_SLOTS)
        outcome = await form.submit({"name": "Acme"})

        url = await form.select("logo", make_file("logo.png"))

        assert url == f"https://cdn.test/uploads/brand/{outcome.entity_id}/logo/logo.png"
        assert entity_api.patches == [("brand", outcome.entity_id, {"logo": url})]
        assert len(entity_api.created) == 1

    @pytest.mark.asyncio
    async def test_mirroring_slot_rejects_files_while_reuse_is_on(self, make_form, make_file, entity_api, gateway):
        form = make_form()

        with pytest.raises(SelectionError):
            await form.select("card-image", make_file("card.png"))

        await form.set_reuse("card-image", False)
        await form.select("image", make_file("featured.png"))
        await form.select("card-image", make_file("card.png"))
        outcome = await form.submit({"title": "Atlas"})

        _, entity_id, fields = entity_api.patches[0]
        assert fields["card_image"].endswith("/card-image/card.png")
        assert fields["featured_image"].endswith("/image/featured.png")
        assert sorted(call[2] for call in gateway.calls) == ["card-image", "image"]
        assert outcome.ok

    @pytest.mark.asyncio
    async def test_enabling_reuse_drops_separately_staged_file(self, make_form, make_file, previews):
        form = make_form(reuse=False)
        await form.select("card-image", make_file("card.png"))
        assert "card-image" in form.pending

        await form.set_reuse("card-image", True)

        assert "card-image" not in form.pending
        assert len(previews) == 0

    @pytest.mark.asyncio
    async def test_close_discards_late_upload_results(self, make_form, make_file, entity_api, transport, previews):
        form = make_form()
        await form.select("image", make_file("featured.png"))
        transport.gates["featured.png"] = gate = asyncio.Event()

        task = asyncio.create_task(form.submit({"title": "Atlas"}))
        await asyncio.sleep(0)
        form.close()
        gate.set()
        outcome = await task

        assert outcome.entity_id is not None
        assert outcome.uploaded == {}
        assert outcome.failed == {}
        assert entity_api.patches == []
        assert len(previews) == 0

    @pytest.mark.asyncio
    async def test_unknown_slot_is_rejected(self, make_form, make_file):
        form = make_form()

        with pytest.raises(SelectionError, match="Unknown asset slot"):
            await form.select("avatar", make_file())

    def test_mirror_must_reference_known_slot(self, make_form):
        with pytest.raises(ValueError):
            make_form(slots=[AssetSlot("card-image", "card_image", mirror_of="image")])


class TestEditMode:
    @pytest.mark.asyncio
    async def test_failed_logo_upload_leaves_field_and_skips_patch(self, make_form, make_file, entity_api, transport, notifier):
        transport.fail_names.add("logo.png")
        form = make_form(
            "brand",
            BRAND_SLOTS,
            entity={"id": "b-1", "name": "Acme", "logo": "https://cdn.test/old-logo.png"},
        )

        url = await form.select("logo", make_file("logo.png"))

        assert url is None
        assert entity_api.patches == []
        assert form.values["logo"] == "https://cdn.test/old-logo.png"
        assert form.display_url("logo") == "https://cdn.test/old-logo.png"
        errors = notifier.errors()
        assert len(errors) == 1
        assert errors[0].field == "logo"

    @pytest.mark.asyncio
    async def test_successful_upload_patches_single_field(self, make_form, make_file, entity_api):
        form = make_form("brand", BRAND_SLOTS, entity={"id": "b-1", "name": "Acme", "logo": None})

        url = await form.select("logo", make_file("logo.png"))

        assert url == "https://cdn.test/uploads/brand/b-1/logo/logo.png"
        assert entity_api.patches == [("brand", "b-1", {"logo": url})]
        assert form.values["logo"] == url

    @pytest.mark.asyncio
    async def test_reuse_defaults_off_and_enabling_copies_source(self, make_form, entity_api):
        form = make_form(
            entity={"id": "p-1", "featured_image": "https://cdn.test/f.png", "card_image": "https://cdn.test/c.png"},
        )
        assert form.reuse["card-image"] is False

        await form.set_reuse("card-image", True)

        assert entity_api.patches == [("project", "p-1", {"card_image": "https://cdn.test/f.png"})]
        assert form.values["card_image"] == "https://cdn.test/f.png"

    @pytest.mark.asyncio
    async def test_source_upload_updates_mirroring_field(self, make_form, make_file, entity_api):
        form = make_form(entity={"id": "p-1"}, reuse=True)

        url = await form.select("image", make_file("featured.png"))

        assert entity_api.patches == [("project", "p-1", {"featured_image": url, "card_image": url})]

    @pytest.mark.asyncio
    async def test_unsaved_url_is_carried_by_next_save(self, make_form, make_file, entity_api, gateway):
        entity_api.fail_patch = True
        form = make_form("brand", BRAND_SLOTS, entity={"id": "b-1", "name": "Acme", "logo": None})
        url = await form.select("logo", make_file("logo.png"))
        assert form.unattached == {"logo": url}

        entity_api.fail_patch = False
        outcome = await form.submit({"name": "Acme Corp"})

        assert outcome.patched is True
        assert entity_api.patches[-1] == ("brand", "b-1", {"name": "Acme Corp", "logo": url})
        assert form.unattached == {}
        assert len(gateway.calls) == 1

    @pytest.mark.asyncio
    async def test_site_logo_uploads_under_settings_record(self, make_form, make_file, entity_api, gateway, notifier):
        form = make_form(
            "admin",
            SITE_SETTINGS_SLOTS,
            entity={"id": "settings", "site_name": "Acme", "logo": None, "favicon": None},
            label="Site settings",
        )

        url = await form.select("logo", make_file("logo.png"))

        assert gateway.calls == [("admin", "settings", "logo", "logo.png")]
        assert entity_api.patches == [("admin", "settings", {"logo": url})]
        assert notifier.history[-1].message == "Site logo updated"

        entity_api.fail_patch = True
        await form.submit({"site_name": "Acme Studio"})
        assert notifier.errors()[-1].message == "Failed to update site settings: Database unavailable"

    @pytest.mark.asyncio
    async def test_unexpected_save_error_is_reported(self, make_form, make_file, entity_api, notifier):
        entity_api.patch = AsyncMock(side_effect=RuntimeError("connection reset"))
        form = make_form("brand", BRAND_SLOTS, entity={"id": "b-1", "name": "Acme", "logo": None})

        url = await form.select("logo", make_file("logo.png"))

        assert url is not None
        assert form.unattached == {"logo": url}
        errors = notifier.errors()
        assert len(errors) == 1
        assert errors[0].field == "logo"
        assert "connection reset" in errors[0].message

    @pytest.mark.asyncio
    async def test_edit_save_failure_returns_to_composing(self, make_form, entity_api, notifier):
        entity_api.fail_patch = True
        form = make_form("brand", BRAND_SLOTS, entity={"id": "b-1", "name": "Acme"})

        outcome = await form.submit({"name": "Acme Corp"})

        assert isinstance(outcome.error, EntityMutationError)
        assert form.state == FormState.COMPOSING
        assert len(notifier.errors()) == 1
