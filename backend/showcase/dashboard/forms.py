"""Entity forms with image fields.

An asset URL can only be issued for an entity that exists, so creating an
entity with images is staged: create the entity without its assets, upload
every staged file under the new id, then attach the obtained URLs with a
single patch. Editing an existing entity uploads each file as soon as it is
selected and patches that field on completion.
"""
import asyncio
import functools
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from showcase.config import get_settings
from showcase.dashboard.api_client import EntityApi, UploadGateway
from showcase.dashboard.errors import DashboardError, EntityMutationError, SelectionError, TransportError
from showcase.dashboard.notifications import Notifier
from showcase.dashboard.previews import PreviewRegistry
from showcase.dashboard.session import FileValidator, PendingUpload, UploadResult, UploadSession
from showcase.dashboard.transport import DirectUploadTransport, LocalFile

settings = get_settings()
logger = logging.getLogger("showcase.dashboard.forms")


@dataclass(frozen=True)
class AssetSlot:
    """One image field of a form.

    ``mirror_of`` names the intent of another slot whose URL this field can
    reuse (e.g. the card image reusing the featured image).
    """
    intent: str
    field: str
    mirror_of: Optional[str] = None
    label: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.label or self.field.replace("_", " ")


# Edit the singleton with
# AssetForm(SITE_SETTINGS_ENTITY_TYPE, SITE_SETTINGS_SLOTS, entity=await client.get_site_settings(), ...)
SITE_SETTINGS_SLOTS = (
    AssetSlot("logo", "logo", label="site logo"),
    AssetSlot("favicon", "favicon"),
)


class FormState(str, Enum):
    COMPOSING = "composing"
    SUBMITTING = "submitting"
    ATTACHING_ASSETS = "attaching_assets"
    PATCHING = "patching"
    DONE = "done"


class PendingCreationState:
    """Files staged before the entity exists, keyed by intent."""

    def __init__(self):
        self._uploads: dict[str, PendingUpload] = {}

    def stage(self, upload: PendingUpload) -> None:
        self._uploads[upload.intent] = upload

    def discard(self, intent: str) -> None:
        self._uploads.pop(intent, None)

    def consume(self) -> dict[str, PendingUpload]:
        uploads, self._uploads = self._uploads, {}
        return uploads

    def clear(self) -> None:
        self._uploads.clear()

    @property
    def intents(self) -> list[str]:
        return list(self._uploads)

    def __contains__(self, intent: str) -> bool:
        return intent in self._uploads

    def __len__(self) -> int:
        return len(self._uploads)


@dataclass
class SubmitOutcome:
    entity: Optional[dict] = None
    entity_id: Optional[str] = None
    uploaded: dict[str, str] = field(default_factory=dict)
    failed: dict[str, DashboardError] = field(default_factory=dict)
    patched: bool = False
    error: Optional[DashboardError] = None
    patch_error: Optional[DashboardError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.patch_error is None and not self.failed


class CreateStrategy:
    """Stage files locally; create, upload, then patch once on submit."""

    def __init__(self, form: "AssetForm"):
        self.form = form

    async def on_select(self, slot: AssetSlot, session: UploadSession) -> Optional[str]:
        self.form.pending.stage(session.pending())
        return None

    async def on_upload_complete(self, slot: AssetSlot, url: str, result: UploadResult) -> None:
        # URLs are collected by submit and attached in one patch
        return None

    async def on_reuse_enabled(self, slot: AssetSlot) -> None:
        return None

    async def submit(self, payload: dict) -> SubmitOutcome:
        form = self.form
        label = form.label

        form.state = FormState.SUBMITTING
        body = {k: v for k, v in payload.items() if k not in form.asset_fields}
        try:
            entity = await form.entity_api.create(form.entity_type, body)
        except DashboardError as e:
            form.state = FormState.COMPOSING
            form.notifier.error(f"Failed to create {label.lower()}: {e.message}")
            return SubmitOutcome(error=e)

        entity_id = str(entity["id"])
        form.entity = entity
        form.entity_id = entity_id
        outcome = SubmitOutcome(entity=entity, entity_id=entity_id)
        logger.info(f"Created {form.entity_type} {entity_id}")

        form.state = FormState.ATTACHING_ASSETS
        staged = form.pending.consume()
        outcome.uploaded, outcome.failed = await form.upload_staged(entity_id, staged)
        for intent, error in outcome.failed.items():
            slot = form.slots[intent]
            form.notifier.error(f"Failed to upload {slot.display_name}: {error.message}", field=slot.field)

        if form.closed:
            logger.info(f"Form closed before assets of {form.entity_type} {entity_id} were attached")
            return outcome

        fields = {form.slots[intent].field: url for intent, url in outcome.uploaded.items()}
        fields.update(form.mirrored_fields(outcome.uploaded))

        form.state = FormState.PATCHING
        if fields:
            try:
                outcome.entity = await form.entity_api.patch(form.entity_type, entity_id, fields)
                outcome.patched = True
                form.entity = outcome.entity
                form.values.update(fields)
            except DashboardError as e:
                outcome.patch_error = e
                form.unattached.update(fields)
                form.notifier.error(f"{label} created but its images could not be saved: {e.message}")

        form.state = FormState.DONE
        form.notifier.success(f"{label} created successfully")
        form.release_sessions()
        # The entity exists now; further saves patch it
        form.strategy = EditStrategy(form)
        return outcome


class EditStrategy:
    """Upload on select and patch each field as soon as its upload completes."""

    def __init__(self, form: "AssetForm"):
        self.form = form

    async def on_select(self, slot: AssetSlot, session: UploadSession) -> Optional[str]:
        url = await session.upload(entity_id=self.form.entity_id, intent=slot.intent)
        if url is None and session.error is not None:
            self.form.notifier.error(
                f"Failed to upload {slot.display_name}: {session.error.message}", field=slot.field
            )
        elif url is not None and session.error is not None:
            self.form.unattached.setdefault(slot.field, url)
            self.form.notifier.error(
                f"{slot.display_name.capitalize()} uploaded but could not be saved: {session.error.message}",
                field=slot.field,
            )
        return url

    async def on_upload_complete(self, slot: AssetSlot, url: str, result: UploadResult) -> None:
        fields = {slot.field: url}
        fields.update(self.form.mirrored_fields({slot.intent: url}))
        await self.attach(fields, slot)

    async def on_reuse_enabled(self, slot: AssetSlot) -> None:
        source = self.form.slots[slot.mirror_of]
        source_url = self.form.values.get(source.field)
        if source_url:
            await self.attach({slot.field: source_url}, slot)

    async def attach(self, fields: dict, slot: AssetSlot) -> bool:
        form = self.form
        try:
            form.entity = await form.entity_api.patch(form.entity_type, form.entity_id, fields)
        except DashboardError as e:
            # Kept so the next save carries it; the upload itself is not repeated
            form.unattached.update(fields)
            form.notifier.error(
                f"{slot.display_name.capitalize()} uploaded but could not be saved: {e.message}",
                field=slot.field,
            )
            return False

        form.values.update(fields)
        for name in fields:
            form.unattached.pop(name, None)
        form.notifier.success(f"{slot.display_name.capitalize()} updated")
        return True

    async def submit(self, payload: dict) -> SubmitOutcome:
        form = self.form
        label = form.label

        form.state = FormState.SUBMITTING
        body = dict(payload)
        body.update(form.unattached)
        try:
            entity = await form.entity_api.patch(form.entity_type, form.entity_id, body)
        except DashboardError as e:
            form.state = FormState.COMPOSING
            form.notifier.error(f"Failed to update {label.lower()}: {e.message}")
            return SubmitOutcome(entity_id=form.entity_id, error=e)

        attached = dict(form.unattached)
        form.values.update(attached)
        form.unattached.clear()
        form.entity = entity
        form.state = FormState.DONE
        form.notifier.success(f"{label} updated successfully")
        return SubmitOutcome(entity=entity, entity_id=form.entity_id, patched=True)


class AssetForm:
    """Create or edit one entity together with its image fields.

    Pass ``entity`` to edit an existing record; omit it to create one. A
    create form switches to edit mode once its entity has been created, so
    saving again patches that entity instead of creating another.
    """

    def __init__(
        self,
        entity_type: str,
        slots: Iterable[AssetSlot],
        *,
        entity_api: EntityApi,
        gateway: UploadGateway,
        transport: DirectUploadTransport,
        previews: Optional[PreviewRegistry] = None,
        notifier: Optional[Notifier] = None,
        entity: Optional[dict] = None,
        parallel_uploads: Optional[bool] = None,
        validator: Optional[FileValidator] = None,
        reuse: Optional[bool] = None,
        label: Optional[str] = None,
    ):
        self.entity_type = entity_type
        self.label = label or entity_type.replace("-", " ").capitalize()
        self.slots: dict[str, AssetSlot] = {slot.intent: slot for slot in slots}
        for slot in self.slots.values():
            if slot.mirror_of is not None and slot.mirror_of not in self.slots:
                raise ValueError(f"Slot {slot.intent} mirrors unknown slot {slot.mirror_of}")

        self.entity_api = entity_api
        self.previews = previews or PreviewRegistry()
        self.notifier = notifier or Notifier()
        self.parallel_uploads = settings.PARALLEL_ASSET_UPLOADS if parallel_uploads is None else parallel_uploads

        self.entity = dict(entity) if entity is not None else None
        self.entity_id: Optional[str] = str(entity["id"]) if entity is not None else None
        self.values: dict[str, Optional[str]] = {
            slot.field: (entity or {}).get(slot.field) for slot in self.slots.values()
        }
        self.unattached: dict[str, Optional[str]] = {}
        self.pending = PendingCreationState()
        self.state = FormState.COMPOSING
        self._closed = False

        if entity is not None:
            self.strategy = EditStrategy(self)
        else:
            self.strategy = CreateStrategy(self)

        reuse_default = not self.editing if reuse is None else reuse
        self.reuse: dict[str, bool] = {
            slot.intent: reuse_default for slot in self.slots.values() if slot.mirror_of
        }

        self.sessions: dict[str, UploadSession] = {
            slot.intent: UploadSession(
                entity_type,
                gateway=gateway,
                transport=transport,
                previews=self.previews,
                entity_id=self.entity_id or "",
                intent=slot.intent,
                on_complete=functools.partial(self._on_upload_complete, slot),
                validator=validator,
                initial_url=self.values[slot.field],
            )
            for slot in self.slots.values()
        }

    @property
    def editing(self) -> bool:
        return isinstance(self.strategy, EditStrategy)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def asset_fields(self) -> frozenset[str]:
        return frozenset(slot.field for slot in self.slots.values())

    def _slot(self, intent: str) -> AssetSlot:
        try:
            return self.slots[intent]
        except KeyError:
            raise SelectionError(f"Unknown asset slot: {intent}") from None

    def is_mirroring(self, intent: str) -> bool:
        return self.reuse.get(intent, False)

    def display_url(self, intent: str) -> Optional[str]:
        slot = self._slot(intent)
        if self.is_mirroring(intent):
            source = self.sessions[slot.mirror_of]
            return source.display_url or self.values.get(self.slots[slot.mirror_of].field)
        return self.sessions[intent].display_url or self.values.get(slot.field)

    def mirrored_fields(self, urls_by_intent: dict[str, str]) -> dict[str, str]:
        """Fields that take a source URL because reuse is enabled for them."""
        fields = {}
        for slot in self.slots.values():
            if slot.mirror_of in urls_by_intent and self.is_mirroring(slot.intent):
                fields[slot.field] = urls_by_intent[slot.mirror_of]
        return fields

    async def _on_upload_complete(self, slot: AssetSlot, url: str, result: UploadResult) -> None:
        if self._closed:
            return
        await self.strategy.on_upload_complete(slot, url, result)

    async def select(self, intent: str, file: Optional[LocalFile]) -> Optional[str]:
        """Stage (create mode) or upload (edit mode) a file for one slot.

        Raises SelectionError for a rejected file, an unknown slot or a slot
        that currently reuses another slot's image.
        """
        if self._closed:
            raise SelectionError("Form is closed")
        slot = self._slot(intent)
        if self.is_mirroring(intent):
            source = self.slots[slot.mirror_of]
            raise SelectionError(
                f"{slot.display_name.capitalize()} reuses the {source.display_name}; "
                f"turn reuse off to choose a separate file"
            )

        session = self.sessions[intent]
        session.select(file)
        return await self.strategy.on_select(slot, session)

    def clear(self, intent: str) -> None:
        slot = self._slot(intent)
        self.sessions[intent].clear()
        self.pending.discard(intent)
        self.values[slot.field] = None
        if self.editing:
            self.unattached[slot.field] = None

    async def set_reuse(self, intent: str, enabled: bool) -> None:
        slot = self._slot(intent)
        if slot.mirror_of is None:
            raise SelectionError(f"{slot.display_name.capitalize()} cannot reuse another image")

        was_enabled = self.reuse[intent]
        self.reuse[intent] = enabled
        if enabled and not was_enabled:
            # A mirroring slot never uploads a file of its own
            self.sessions[intent].clear()
            self.pending.discard(intent)
            await self.strategy.on_reuse_enabled(slot)

    async def upload_staged(
        self, entity_id: str, staged: dict[str, PendingUpload]
    ) -> tuple[dict[str, str], dict[str, DashboardError]]:
        """Upload staged files under ``entity_id``; returns (urls, errors) by intent."""

        async def upload_one(intent: str, pending: PendingUpload):
            session = self.sessions[intent]
            url = await session.upload(pending.file, entity_id, intent)
            return intent, url, session.error

        jobs = [
            upload_one(intent, pending)
            for intent, pending in staged.items()
            if not self.is_mirroring(intent)
        ]
        if self.parallel_uploads:
            results = await asyncio.gather(*jobs)
        else:
            results = [await job for job in jobs]

        uploaded: dict[str, str] = {}
        failed: dict[str, DashboardError] = {}
        for intent, url, error in results:
            if url is not None:
                uploaded[intent] = url
            elif error is not None:
                failed[intent] = error
            elif not self._closed:
                failed[intent] = TransportError("Upload was cancelled")
        return uploaded, failed

    async def submit(self, payload: Optional[dict] = None) -> SubmitOutcome:
        if self._closed:
            raise EntityMutationError("Form is closed")
        if self.state in (FormState.SUBMITTING, FormState.ATTACHING_ASSETS, FormState.PATCHING):
            raise EntityMutationError("Save already in progress")
        return await self.strategy.submit(payload or {})

    def release_sessions(self) -> None:
        for session in self.sessions.values():
            session.clear()
        self.pending.clear()

    def close(self) -> None:
        """Discard staged files and previews; late upload results are ignored."""
        self._closed = True
        self.pending.clear()
        for session in self.sessions.values():
            session.close()
