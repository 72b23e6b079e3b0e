"""Keeps rendered break markers in step with document views.

Structural signals (layout change, recalibration, settings change)
invalidate every container and recompute in full. Growth signals extend
the cached sequence of the container that grew. Update requests against a
container whose breaks are current are served from the cache.
"""

from __future__ import annotations

import logging
from typing import Hashable, Iterable, List, Optional

from .breaks import extend_breaks, generate_breaks, markers_for
from .cache import BreakCache, CacheEntry, ContainerState
from .constants import OverlayConstants
from .errors import ConfigurationError, MissingTargetError, ObservationFailure
from .geometry import page_height_pixels
from .host import DocumentHost, DocumentView, MarkerRenderer, RenderedContainer
from .page_config import OverlaySettings
from .scheduler import TaskScheduler
from .settings_persistence import SettingsPersistence

logger = logging.getLogger(__name__)

# Scheduler keys
STRUCTURAL_TASK = "structural"
SETTLE_TASK = "settle"
RECALIBRATE_TASK = "recalibrate"
INITIAL_TASK = "initial"


def _container_task(handle: Hashable) -> tuple:
    return ("container", handle)


class ViewSynchronizer:
    """Orchestrates break computation, caching and rendering for all views."""

    def __init__(self, host: DocumentHost, renderer: MarkerRenderer, scheduler: TaskScheduler,
                 settings: Optional[OverlaySettings] = None,
                 store: Optional[SettingsPersistence] = None,
                 hysteresis: float = OverlayConstants.GROWTH_HYSTERESIS_PX):
        """Create a synchronizer.

        Args:
            host: Source of document views.
            renderer: Collaborator that draws markers.
            scheduler: Deferred task scheduler on the host's event thread.
            settings: Initial settings snapshot. Loaded from ``store`` (or
                defaults) when omitted.
            store: Where settings are persisted on apply_settings.
            hysteresis: Minimum growth in px before breaks are extended.
        """
        self.host = host
        self.renderer = renderer
        self.scheduler = scheduler
        self.store = store
        if settings is None:
            settings = store.load() if store is not None else OverlaySettings()
        self.settings = settings
        self.hysteresis = hysteresis
        self.cache = BreakCache()
        self.visible = True
        self.computation_count = 0
        self.extension_count = 0

    # --- Lifecycle ---

    def start(self) -> None:
        """Schedule the first full update once the host has settled."""
        self.scheduler.schedule(INITIAL_TASK, OverlayConstants.INITIAL_UPDATE_DELAY,
                                self.update_all_views)

    def shutdown(self) -> None:
        """Cancel pending work, detach observers and remove all markers."""
        self.scheduler.cancel_all()
        for handle in self.cache.handles():
            self.renderer.clear(handle)
        self.cache.clear()

    # --- Host signals ---

    def on_layout_change(self) -> None:
        """Structural change: invalidate everything, recompute after the burst."""
        logger.info("Layout changed - recalculating")
        self.cache.invalidate_all()
        self.scheduler.schedule(STRUCTURAL_TASK, OverlayConstants.STRUCTURAL_DEBOUNCE,
                                self.update_all_views)

    def on_active_view_change(self) -> None:
        self.scheduler.schedule(SETTLE_TASK, OverlayConstants.ACTIVE_VIEW_SETTLE_DELAY,
                                self.update_all_views)

    def on_file_open(self) -> None:
        self.scheduler.schedule(SETTLE_TASK, OverlayConstants.FILE_OPEN_SETTLE_DELAY,
                                self.update_all_views)

    def on_content_growth(self, handle: Optional[Hashable] = None) -> List[float]:
        """Extend breaks for containers that grew past the hysteresis threshold.

        Args:
            handle: Container that signalled, or None to check every
                cached container.

        Returns:
            All breaks added during this call.
        """
        handles: Iterable[Hashable] = self.cache.handles() if handle is None else [handle]
        added: List[float] = []
        for h in handles:
            try:
                added.extend(self._extend_if_grown(h))
            except Exception:
                logger.exception(f"Error extending page breaks for {h!r}")
        return added

    def request_update(self, handle: Hashable, delay: float) -> None:
        """Refresh one container after ``delay``; a newer request supersedes."""
        self.scheduler.schedule(_container_task(handle), delay,
                                lambda: self._deferred_update(handle))

    def close_view(self, handle: Hashable) -> None:
        """Forget a container whose view was closed or replaced."""
        self.scheduler.cancel(_container_task(handle))
        if self.cache.remove(handle) is not None:
            logger.debug(f"Removed break cache entry for {handle!r}")
        self.renderer.clear(handle)

    # --- User actions ---

    def toggle_visibility(self) -> bool:
        self.visible = not self.visible
        self.renderer.set_visible(self.visible)
        return self.visible

    def recalibrate(self) -> None:
        """Discard all breaks and markers, then recompute shortly after."""
        logger.info("Manual recalibration")
        self.cache.invalidate_all()
        for handle in self.cache.handles():
            self.renderer.clear(handle)
        self.scheduler.schedule(RECALIBRATE_TASK, OverlayConstants.RECALIBRATE_DELAY,
                                self.update_all_views)

    def apply_settings(self, settings: OverlaySettings, persist: bool = True) -> bool:
        """Switch to new settings and recompute every container.

        Returns:
            False if persisting failed. The new settings still apply to
            this session.
        """
        saved = True
        if persist and self.store is not None:
            saved = self.store.save(settings)
        self.settings = settings
        self.cache.invalidate_all()
        self.update_all_views()
        return saved

    # --- Computation ---

    def update_all_views(self) -> None:
        """Bring every open view up to date, dropping entries for closed ones."""
        views = self.host.active_views()
        logger.debug(f"Updating {len(views)} document views")
        live: List[Hashable] = []
        for view in views:
            try:
                container = view.content_container()
            except MissingTargetError as e:
                logger.debug(f"No content container: {e}")
                continue
            live.append(container.handle)
            self._update_isolated(container)
        for handle in self.cache.prune(live):
            self.scheduler.cancel(_container_task(handle))
            self.renderer.clear(handle)

    def update_view(self, view: DocumentView) -> Optional[List[float]]:
        try:
            container = view.content_container()
        except MissingTargetError as e:
            logger.debug(f"No content container: {e}")
            return None
        return self._update_isolated(container)

    def update_container(self, container: RenderedContainer) -> Optional[List[float]]:
        """Return current breaks for ``container``, computing them if needed.

        Collaborator errors propagate from here; the signal handlers and
        update_view log them instead. If rendering fails the entry is left
        invalidated so the next update recomputes.

        Returns:
            The break sequence, or None if the configuration is unusable.
        """
        handle = container.handle
        entry = self.cache.get(handle)
        if entry is not None and entry.is_current:
            logger.debug(f"Using cached breaks for {handle!r}")
            return list(entry.breaks)

        page = self.settings.page
        try:
            page_height = page_height_pixels(page)
        except ConfigurationError as e:
            logger.warning(f"Skipping page breaks: {e}")
            self.cache.invalidate(handle)
            self.renderer.clear(handle)
            return None

        total_height = container.scroll_height
        breaks = generate_breaks(total_height, page_height, page.calibration_offset,
                                 page.min_break_spacing)
        self.computation_count += 1
        logger.debug(
            f"Calculated {len(breaks)} breaks for {handle!r} "
            f"(height {total_height:.0f}px, page {page_height:.1f}px)"
        )
        entry = self.cache.store(container, breaks, total_height, page_height)
        try:
            self.renderer.render(container, markers_for(entry.breaks), self.settings.style)
        except Exception:
            # Nothing was drawn, so the next update must recompute
            self.cache.invalidate(handle)
            raise
        self._ensure_observer(entry)
        return list(entry.breaks)

    def breaks_for(self, handle: Hashable) -> List[float]:
        return self.cache.breaks(handle)

    def state_of(self, handle: Hashable) -> ContainerState:
        return self.cache.state(handle)

    # --- Internals ---

    def _update_isolated(self, container: RenderedContainer) -> Optional[List[float]]:
        """Update one container; a failure is logged and never reaches the host."""
        try:
            return self.update_container(container)
        except Exception:
            logger.exception(f"Error updating page breaks for {container.handle!r}")
            return None

    def _deferred_update(self, handle: Hashable) -> None:
        for view in self.host.active_views():
            try:
                container = view.content_container()
            except MissingTargetError:
                continue
            if container.handle == handle:
                self._update_isolated(container)
                return
        logger.debug(f"Deferred update for closed container {handle!r} ignored")

    def _ensure_observer(self, entry: CacheEntry) -> None:
        if entry.subscription is not None:
            return
        handle = entry.container.handle
        try:
            entry.subscription = entry.container.observe_height(
                lambda: self.on_content_growth(handle)
            )
        except ObservationFailure as e:
            logger.info(f"Height observation unavailable for {handle!r}: {e}")
        except Exception:
            logger.exception(f"Could not observe height of {handle!r}, growth will not be tracked")

    def _extend_if_grown(self, handle: Hashable) -> List[float]:
        entry = self.cache.get(handle)
        if entry is None or not entry.is_current:
            return []
        new_height = entry.container.scroll_height
        if new_height <= entry.height + self.hysteresis:
            return []

        page = self.settings.page
        existing_count = len(entry.breaks)
        additional = extend_breaks(entry.breaks, entry.height, new_height, entry.page_height,
                                   page.calibration_offset, page.min_break_spacing)
        logger.debug(f"Extending {handle!r} from {entry.height:.0f}px to {new_height:.0f}px")
        self.cache.extend(handle, additional, new_height)
        self.extension_count += 1
        if additional:
            markers = markers_for(additional,
                                  OverlayConstants.FIRST_BREAK_PAGE + existing_count)
            self.renderer.append(entry.container, markers, self.settings.style)
        return additional
