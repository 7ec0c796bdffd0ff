"""
Document Session Controller - Orchestrator of the viewer/editor state

This controller owns the currently displayed document, its dirty state and
display mode. It drives browsing history, recent files, linked-document
discovery and split-view scroll sync, and talks to storage, rendering and
remote fetching only through injected collaborators.
"""

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from mdox.controllers.linked_documents_controller import LinkedDocumentsController
from mdox.core.config_manager import ConfigManager
from mdox.core.link_resolver import (
    LinkResolver,
    is_markdown_locator,
    is_remote_locator,
    normalize_anchor_id,
    split_fragment,
)
from mdox.core.models import DocumentIdentity, DocumentSession, LinkedDocument, LinkKind, Mode
from mdox.core.navigation_history import NavigationHistoryStack
from mdox.core.recent_files import RecentFilesList
from mdox.core.scroll_sync import Pane, ScrollSyncCoordinator
from mdox.core.state_manager import StateManager
from mdox.exceptions import (
    LinkResolutionError,
    LoadError,
    MdoxError,
    RemoteSaveRejectedError,
    SaveError,
)
from mdox.interfaces.service_interfaces import (
    IContentStore,
    IRemoteFetchService,
    IRenderService,
    IUserPrompt,
)

logger = logging.getLogger(__name__)


class DocumentSessionController(QObject):
    """
    {
        "name": "DocumentSessionController",
        "version": "1.0.0",
        "description": "Owns the document session and coordinates navigation, editing and saving.",
        "dependencies": [
            "IContentStore", "IRenderService", "IRemoteFetchService", "IUserPrompt",
            "LinkedDocumentsController", "NavigationHistoryStack", "RecentFilesList",
            "ScrollSyncCoordinator", "StateManager", "ConfigManager"
        ],
        "interface": {
            "inputs": ["navigation requests", "edits", "save requests", "mode toggles"],
            "outputs": "Session snapshots, navigation state and error banners"
        }
    }

    Every load carries a generation number; a load that completes after a newer
    one was issued is discarded. The unsaved-changes confirmation is awaited
    before anything is mutated, and a declined confirmation aborts the request
    without side effects.
    """

    # UI Update Signals
    session_changed = pyqtSignal(object)  # DocumentSession snapshot
    document_loaded = pyqtSignal(str)  # locator
    document_load_failed = pyqtSignal(str)  # user message
    document_saved = pyqtSignal(str)  # locator
    save_failed = pyqtSignal(str)  # user message
    error_changed = pyqtSignal(object)  # MdoxError | None
    loading_changed = pyqtSignal(bool)
    history_changed = pyqtSignal(bool, bool)  # can_go_back, can_go_forward
    mode_changed = pyqtSignal(object)  # Mode
    anchor_requested = pyqtSignal(str)  # heading id
    external_link_requested = pyqtSignal(str)  # url

    def __init__(
        self,
        content_store: IContentStore,
        render_service: IRenderService,
        remote_fetch_service: IRemoteFetchService,
        linked_documents: LinkedDocumentsController,
        user_prompt: IUserPrompt,
        config_manager: ConfigManager,
        *,
        state_manager: StateManager | None = None,
        history: NavigationHistoryStack | None = None,
        recent_files: RecentFilesList | None = None,
        scroll_sync: ScrollSyncCoordinator | None = None,
    ):
        """
        Initialize the session controller with its collaborators.

        Args:
            content_store: Local storage (read, write, path resolution, save picker)
            render_service: Markdown renderer
            remote_fetch_service: HTTP(S) document fetcher
            linked_documents: Discovery client, driven by the root document
            user_prompt: Confirmation and alert dialogs
            config_manager: Persistence port for settings and recent files
            state_manager: View state to publish into
            history: Browsing history
            recent_files: Recent root documents
            scroll_sync: Split-view scroll coordinator
        """
        super().__init__()

        self._content_store = content_store
        self._render_service = render_service
        self._remote = remote_fetch_service
        self._linked_documents = linked_documents
        self._prompt = user_prompt
        self._config = config_manager
        self._state = state_manager or StateManager()
        self._history = history or NavigationHistoryStack()
        self._recent_files = recent_files or RecentFilesList(config_manager)
        self._scroll_sync = scroll_sync or ScrollSyncCoordinator()
        self._link_resolver = LinkResolver(content_store)

        self._session = DocumentSession()
        self._load_generation = 0
        self._pending_history_index: int | None = None
        self._render_generation = 0
        self._is_loading = False
        self._error: MdoxError | None = None

        self._state.set_state("ui.recent_files", self._recent_files.items)
        logger.info("DocumentSessionController initialized")

    # Read-only surface for the presentation layer

    @property
    def session(self) -> DocumentSession:
        return self._session.snapshot()

    @property
    def identity(self) -> DocumentIdentity | None:
        return self._session.identity

    @property
    def mode(self) -> Mode:
        return self._session.mode

    @property
    def dirty(self) -> bool:
        return self._session.dirty

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> MdoxError | None:
        return self._error

    @property
    def can_go_back(self) -> bool:
        return self._history.can_go_back

    @property
    def can_go_forward(self) -> bool:
        return self._history.can_go_forward

    @property
    def history(self) -> NavigationHistoryStack:
        return self._history

    @property
    def linked_documents(self) -> list[LinkedDocument]:
        return self._linked_documents.linked_documents

    @property
    def linked_documents_loading(self) -> bool:
        return self._linked_documents.is_loading

    @property
    def discovery_root(self) -> str | None:
        return self._linked_documents.root_locator

    @property
    def recent_files(self) -> list[str]:
        return self._recent_files.items

    @property
    def scroll_sync(self) -> ScrollSyncCoordinator:
        return self._scroll_sync

    def scroll_to_percentage(self, pane: Pane, percentage: float) -> None:
        self._scroll_sync.scroll_to_percentage(pane, percentage)

    # Navigation

    async def open(
        self,
        locator: str,
        *,
        add_to_history: bool = True,
        is_root_document: bool = False,
        add_to_recent: bool = True,
    ) -> bool:
        """
        Load and display the document at `locator`.

        Args:
            locator: File path or http(s) URL
            add_to_history: Push the document onto the browsing history
            is_root_document: Make it the discovery root (explicit user opens only)
            add_to_recent: Register a recent-file entry (root documents only)

        Returns:
            True if the document was loaded and displayed
        """
        return await self._open(
            locator,
            add_to_history=add_to_history,
            is_root_document=is_root_document,
            add_to_recent=add_to_recent,
        )

    async def _open(
        self,
        locator: str,
        *,
        add_to_history: bool,
        is_root_document: bool,
        add_to_recent: bool,
        history_index: int | None = None,
    ) -> bool:
        if not locator:
            return False

        if not await self._confirm_discard():
            logger.debug(f"Open of {locator} aborted: unsaved changes kept")
            return False
        guarded_content = self._session.edited_content

        self._load_generation += 1
        generation = self._load_generation
        self._pending_history_index = history_index

        previous_root = self._linked_documents.root
        if is_root_document:
            self._linked_documents.set_root(None)
        self._set_error(None)
        self._set_loading(True)

        try:
            identity, content = await self._fetch(locator)
            html = await self._render_service.render(content, identity.locator)
        except MdoxError as e:
            if generation != self._load_generation:
                logger.debug(f"Ignoring failure of superseded load: {locator}")
                return False
            error = e if isinstance(e, LoadError) else LoadError(
                f"Failed to open {locator}: {e}", locator=locator, reason=e.user_message
            )
            self._pending_history_index = None
            self._set_error(error)
            self._set_loading(False)
            self.document_load_failed.emit(error.user_message)
            return False

        if generation != self._load_generation:
            logger.info(f"Discarding stale load of {locator}")
            return False

        # Edits made while the load was pending need their own confirmation
        if self._session.dirty and self._session.edited_content != guarded_content:
            confirmed = await self._confirm_discard()
            if generation != self._load_generation:
                logger.info(f"Discarding stale load of {locator}")
                return False
            if not confirmed:
                logger.debug(f"Load of {locator} discarded: edits made during load kept")
                self._pending_history_index = None
                if is_root_document:
                    self._linked_documents.set_root(previous_root)
                self._set_loading(False)
                return False

        self._session = DocumentSession(
            identity=identity,
            original_content=content,
            edited_content=content,
            rendered_html=html,
            dirty=False,
            mode=Mode.VIEW,
        )
        self._scroll_sync.set_enabled(False)

        if is_root_document:
            self._linked_documents.set_root(identity)
            if add_to_recent:
                self._recent_files.add(identity.label)
                self._state.set_state("ui.recent_files", self._recent_files.items)

        if add_to_history:
            self._history.push(identity.locator)
        elif history_index is not None:
            self._history.move_to(history_index)
        self._pending_history_index = None

        self._set_loading(False)
        self._publish_session()
        self._publish_history()
        self.mode_changed.emit(Mode.VIEW)
        self.document_loaded.emit(identity.locator)
        logger.info(f"Opened {identity.label}")
        return True

    async def _fetch(self, locator: str) -> tuple[DocumentIdentity, str]:
        if is_remote_locator(locator):
            fetched = await self._remote.fetch(locator)
            display = locator if fetched.canonical_url != locator else None
            return DocumentIdentity(fetched.canonical_url, True, display), fetched.content

        content = await self._content_store.read(locator)
        return DocumentIdentity(locator, False, None), content

    async def open_root(self, locator: str) -> bool:
        """Open from the menu, file picker, drag-drop or command line."""
        return await self.open(locator, is_root_document=True)

    async def open_recent(self, locator: str) -> bool:
        return await self.open(locator, is_root_document=True)

    async def open_url(self, url: str) -> bool:
        """Open a document from the URL dialog."""
        url = url.strip()
        if not is_remote_locator(url):
            error = LoadError(f"Not an http(s) URL: {url}", locator=url, reason="enter an http:// or https:// URL")
            self._set_error(error)
            self.document_load_failed.emit(error.user_message)
            return False
        return await self.open(url, is_root_document=True)

    async def open_linked_document(self, locator: str) -> bool:
        """Open a sidebar entry; linked documents never become the root."""
        return await self.open(locator, is_root_document=False, add_to_recent=False)

    async def follow_link(self, href: str) -> bool:
        """
        Handle a click on a link inside rendered content.

        Anchors scroll the viewer, external URLs are handed to the host, and
        relative links navigate without touching the discovery root or recents.
        """
        kind = LinkResolver.classify(href)
        if kind is LinkKind.ANCHOR:
            self.anchor_requested.emit(normalize_anchor_id(href))
            return True

        identity = self._session.identity
        if identity is None:
            logger.debug(f"Ignoring link {href}: document has no location")
            return False

        if kind is LinkKind.ABSOLUTE:
            if identity.is_remote and is_remote_locator(href) and is_markdown_locator(href):
                return await self.open(href, is_root_document=False, add_to_recent=False)
            self.external_link_requested.emit(href)
            return False

        path, fragment = split_fragment(href)
        try:
            target = await self._link_resolver.resolve(identity.locator, path, identity.is_remote)
        except LinkResolutionError as e:
            self._set_error(e)
            return False

        opened = await self.open(target, is_root_document=False, add_to_recent=False)
        if opened and fragment:
            self.anchor_requested.emit(normalize_anchor_id(fragment))
        return opened

    async def go_back(self) -> bool:
        """Step back from the current entry, or from the one a pending back/forward is loading."""
        return await self._step_history(-1)

    async def go_forward(self) -> bool:
        return await self._step_history(1)

    async def _step_history(self, step: int) -> bool:
        base = self._pending_history_index
        if base is None:
            base = self._history.cursor
        index = base + step
        if base < 0 or not 0 <= index < len(self._history):
            return False
        return await self._open(
            self._history.entries[index],
            add_to_history=False,
            is_root_document=False,
            add_to_recent=False,
            history_index=index,
        )

    # Editing

    async def edit(self, new_content: str) -> None:
        """
        Apply editor content and refresh the preview.

        Render failures while typing are logged and otherwise ignored.
        """
        session = self._session
        session.edited_content = new_content
        session.dirty = new_content != session.original_content
        self._state.set_state("document.dirty", session.dirty)

        self._render_generation += 1
        generation = self._render_generation
        base_path = session.identity.locator if session.identity else None
        try:
            html = await self._render_service.render(new_content, base_path)
        except Exception as e:
            logger.warning(f"Live preview render failed: {e}")
            return

        if session is not self._session or generation != self._render_generation:
            return
        session.rendered_html = html
        self._publish_session()

    async def save(self) -> bool:
        """
        Persist the edited content to the document's location.

        Returns:
            True if content was written
        """
        session = self._session
        if not session.dirty:
            return False

        identity = session.identity
        if identity is None:
            return await self.save_as()

        if identity.is_remote:
            error = RemoteSaveRejectedError(
                f"Cannot save remote content: {identity.label}", locator=identity.locator
            )
            self._set_error(error)
            self.save_failed.emit(error.user_message)
            return False

        content = session.edited_content
        try:
            await self._content_store.write(identity.locator, content)
        except MdoxError as e:
            await self._report_save_failure(e, identity.locator)
            return False

        self._mark_saved(session, content)
        self.document_saved.emit(identity.locator)
        return True

    async def save_as(self) -> bool:
        """
        Ask for a destination and save there; the saved file becomes the root.

        Returns:
            True if content was written
        """
        session = self._session
        identity = session.identity
        suggested = identity.locator if identity and not identity.is_remote else None

        location = await self._content_store.pick_save_location(suggested)
        if not location:
            logger.debug("Save As cancelled")
            return False

        content = session.edited_content
        try:
            await self._content_store.write(location, content)
        except MdoxError as e:
            await self._report_save_failure(e, location)
            return False

        if session is not self._session:
            logger.info(f"Saved {location}; session was replaced meanwhile")
            return True

        new_identity = DocumentIdentity(location, False, None)
        session.identity = new_identity
        self._mark_saved(session, content)

        self._linked_documents.set_root(new_identity)
        self._recent_files.add(location)
        self._state.set_state("ui.recent_files", self._recent_files.items)
        self.document_saved.emit(location)
        logger.info(f"Saved document as {location}")
        return True

    def _mark_saved(self, session: DocumentSession, content: str) -> None:
        session.original_content = content
        # Edits made while the write was pending stay dirty
        session.dirty = session.edited_content != content
        if session is self._session:
            self._set_error(None)
            self._publish_session()

    async def _report_save_failure(self, cause: MdoxError, locator: str) -> None:
        error = cause if isinstance(cause, SaveError) else SaveError(
            f"Failed to save {locator}: {cause}", locator=locator, reason=cause.user_message
        )
        self._set_error(error)
        self.save_failed.emit(error.user_message)
        await self._prompt.alert(error.user_message)

    async def new_document(self) -> bool:
        """Start an untitled document from the template, in edit mode."""
        if not await self._confirm_discard():
            return False

        # Supersede any load still in flight
        self._pending_history_index = None
        self._load_generation += 1
        self._linked_documents.set_root(None)
        self._set_loading(False)
        self._set_error(None)

        template = self._config.get("session.new_document_template", "")
        try:
            html = await self._render_service.render(template, None)
        except Exception as e:
            logger.warning(f"Failed to render new document template: {e}")
            html = ""

        self._session = DocumentSession(
            identity=None,
            original_content="",
            edited_content=template,
            rendered_html=html,
            dirty=True,
            mode=Mode.EDIT,
        )
        self._scroll_sync.set_enabled(False)
        self._publish_session()
        self.mode_changed.emit(Mode.EDIT)
        logger.info("Created new untitled document")
        return True

    # Mode transitions

    def toggle_edit_mode(self) -> bool:
        """
        Switch between viewing and editing.

        Entering edit mode opens the split view. Requires a document with a
        location, or an untitled document that is already being edited.

        Returns:
            True if the mode changed
        """
        session = self._session
        if session.identity is None and not session.mode.is_editing:
            return False

        self._set_mode(Mode.EDIT_SPLIT if session.mode is Mode.VIEW else Mode.VIEW)
        return True

    def toggle_split(self) -> bool:
        """Flip between Edit and EditSplit; no-op while viewing."""
        if self._session.mode is Mode.EDIT:
            self._set_mode(Mode.EDIT_SPLIT)
        elif self._session.mode is Mode.EDIT_SPLIT:
            self._set_mode(Mode.EDIT)
        else:
            return False
        return True

    def _set_mode(self, mode: Mode) -> None:
        self._session.mode = mode
        self._scroll_sync.set_enabled(mode is Mode.EDIT_SPLIT)
        self._state.set_state("document.mode", mode.value)
        self.mode_changed.emit(mode)
        logger.debug(f"Mode changed to {mode.value}")

    # Errors and guard

    def dismiss_error(self) -> None:
        self._set_error(None)

    async def _confirm_discard(self) -> bool:
        if not self._session.dirty:
            return True
        message = self._config.get("session.unsaved_changes_prompt", "Discard unsaved changes?")
        return await self._prompt.confirm(message)

    def _set_error(self, error: MdoxError | None) -> None:
        if error is self._error:
            return
        self._error = error
        self._state.set_state("ui.last_error", error.to_dict() if error else None)
        self.error_changed.emit(error)

    def _set_loading(self, loading: bool) -> None:
        if loading == self._is_loading:
            return
        self._is_loading = loading
        self._state.set_state("ui.is_loading", loading)
        self.loading_changed.emit(loading)

    def _publish_session(self) -> None:
        session = self._session
        identity = session.identity
        self._state.update(
            {
                "document.locator": identity.locator if identity else None,
                "document.display_locator": identity.display_locator if identity else None,
                "document.is_remote": identity.is_remote if identity else False,
                "document.dirty": session.dirty,
                "document.mode": session.mode.value,
                "document.rendered_html": session.rendered_html,
            }
        )
        self.session_changed.emit(session.snapshot())

    def _publish_history(self) -> None:
        self._state.update(
            {
                "navigation.can_go_back": self._history.can_go_back,
                "navigation.can_go_forward": self._history.can_go_forward,
            }
        )
        self.history_changed.emit(self._history.can_go_back, self._history.can_go_forward)

    async def aclose(self) -> None:
        await self._linked_documents.aclose()
