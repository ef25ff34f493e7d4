"""Plan-driven wordmark customization.

This module applies a customization plan to a wordmark base:

1. Normalize the plan (lower-case letters)
2. Compress glyph outlines horizontally about the wordmark center
3. Apply devices in plan order, each consuming the glyph(s) it edits
4. Recombine glyph paths and measure the effect
5. Retry once with intensified devices when the effect is negligible

Every device failure is recorded in the manifest; the pass itself never
raises for a device.
"""

from dataclasses import dataclass, replace

from markforge.config import MarkforgeSettings, get_default_settings
from markforge.core.boolean import path_area
from markforge.core.devices import (
    BooleanOptions,
    apply_ligature_bridge,
    apply_notch_cut,
    apply_seam_cut,
)
from markforge.core.geometry import path_bbox, scale_path_x
from markforge.core.metrics import compute_metrics
from markforge.domain import (
    AttemptRecord,
    CustomizationPlan,
    CustomizationResult,
    DeviceSpec,
    GlyphRun,
    LigatureBridge,
    ManifestEntry,
    NotchCut,
    SeamCut,
    WordmarkBase,
    WordmarkMetrics,
)
from markforge.exceptions import DeviceError, GeometryError
from markforge.utils import CustomizationLogger


def find_glyph_index(glyphs: list[GlyphRun], letter: str, used: set[int]) -> int:
    """Index of the first unused glyph matching ``letter``, or -1.

    Matching is case-insensitive.
    """
    target = letter.lower()
    for i, glyph in enumerate(glyphs):
        if i not in used and glyph.char.lower() == target:
            return i
    return -1


@dataclass
class _AttemptOutcome:
    path: str
    manifest: list[ManifestEntry]
    metrics: WordmarkMetrics


class WordmarkCustomizer:
    """Applies customization plans to wordmark bases.

    The customizer is stateless between calls apart from its statistics
    logger, so one instance may be reused across wordmarks.
    """

    def __init__(
        self,
        settings: MarkforgeSettings | None = None,
        logger: CustomizationLogger | None = None,
    ) -> None:
        self.settings = settings or get_default_settings()
        self.logger = logger or CustomizationLogger()
        geo = self.settings.geometry
        self._options = BooleanOptions(
            sample_budget=geo.sample_budget,
            min_sample_spacing=geo.min_sample_spacing,
            precision=geo.precision,
        )

    def customize(
        self,
        base: WordmarkBase,
        plan: CustomizationPlan,
        seed: str = "",
    ) -> CustomizationResult:
        """Run one customization pass.

        Args:
            base: Wordmark to customize
            plan: Devices and global adjustments
            seed: Caller seed, carried through to the result

        Returns:
            Best-effort result with the manifest and every attempt's metrics
        """
        cfg = self.settings.customizer
        geo = self.settings.geometry
        plan = plan.normalized()
        self.logger.log_pass_start(base.text, len(plan.devices), seed)

        original_area = path_area(base.combined_path, geo.metrics_sample_budget)

        if not plan.devices and plan.boldness.compression == 1:
            metrics = self._metrics(base.combined_path, base.combined_path, original_area)
            record = AttemptRecord(1, False, metrics, not base.combined_path, selected=True)
            self.logger.log_pass_complete(1, False, metrics.device_visibility)
            return CustomizationResult(base.combined_path, [], metrics, [record], seed)

        outcomes: list[_AttemptOutcome] = []
        records: list[AttemptRecord] = []
        selected = 0
        devices = plan.devices

        for attempt in range(1, cfg.max_attempts + 1):
            intensified = attempt > 1
            glyphs = self._compressed_glyphs(base, plan.boldness.compression)
            manifest = self._apply_devices(glyphs, devices, attempt)
            combined = " ".join(g.path_d for g in glyphs if g.path_d)
            final_path = combined or base.combined_path
            metrics = self._metrics(base.combined_path, final_path, original_area)

            outcomes.append(_AttemptOutcome(final_path, manifest, metrics))
            records.append(AttemptRecord(attempt, intensified, metrics, not combined))
            if intensified and combined:
                selected = attempt - 1

            if attempt == cfg.max_attempts or not plan.devices or not self._needs_retry(metrics):
                break

            self.logger.log_retry(metrics.device_visibility, metrics.default_font_risk)
            devices = tuple(
                device.intensified(cfg.cut_intensify, cfg.bridge_intensify)
                for device in plan.devices
            )

        records = [replace(r, selected=(i == selected)) for i, r in enumerate(records)]
        chosen = outcomes[selected]
        self.logger.log_pass_complete(len(records), selected > 0, chosen.metrics.device_visibility)
        return CustomizationResult(chosen.path, chosen.manifest, chosen.metrics, records, seed)

    def _needs_retry(self, metrics: WordmarkMetrics) -> bool:
        cfg = self.settings.customizer
        return (
            metrics.device_visibility < cfg.visibility_threshold
            or metrics.default_font_risk > cfg.font_risk_threshold
        )

    def _metrics(self, original: str, modified: str, original_area: float) -> WordmarkMetrics:
        cfg = self.settings.customizer
        return compute_metrics(
            original,
            modified,
            original_area=original_area,
            sample_budget=self.settings.geometry.metrics_sample_budget,
            silhouette_threshold=cfg.silhouette_threshold,
            legibility_loss_threshold=cfg.legibility_loss_threshold,
        )

    def _compressed_glyphs(self, base: WordmarkBase, compression: float) -> list[GlyphRun]:
        """Fresh glyph copies, scaled about the wordmark center when needed."""
        glyphs = list(base.glyph_runs)
        if compression == 1:
            return glyphs

        geo = self.settings.geometry
        cx = base.center_x
        scaled: list[GlyphRun] = []
        for glyph in glyphs:
            path_d = scale_path_x(
                glyph.path_d, compression, cx, geo.compression_sample_budget, geo.precision
            )
            bbox = path_bbox(path_d) if path_d else glyph.bbox
            scaled.append(replace(glyph, path_d=path_d, bbox=bbox))
        return scaled

    def _apply_devices(
        self,
        glyphs: list[GlyphRun],
        devices: tuple[DeviceSpec, ...],
        attempt: int,
    ) -> list[ManifestEntry]:
        """Apply devices in order, editing ``glyphs`` in place."""
        used: set[int] = set()
        manifest: list[ManifestEntry] = []

        for device in devices:
            try:
                self._apply_device(glyphs, device, used)
            except (DeviceError, GeometryError, ValueError) as e:
                reason = e.reason if isinstance(e, DeviceError) else str(e)
                self.logger.log_device_skipped(device.kind, device.target, reason, attempt)
                manifest.append(ManifestEntry(device.kind, device.target, False, reason))
                continue
            self.logger.log_device_applied(device.kind, device.target, attempt)
            manifest.append(ManifestEntry(device.kind, device.target, True))

        return manifest

    def _apply_device(self, glyphs: list[GlyphRun], device: DeviceSpec, used: set[int]) -> None:
        if isinstance(device, LigatureBridge):
            ia = find_glyph_index(glyphs, device.from_letter, used)
            ib = find_glyph_index(glyphs, device.to_letter, used | {ia})
            if ia < 0 or ib < 0:
                raise DeviceError(device.kind, device.target, "no matching glyph")
            merged = apply_ligature_bridge(glyphs[ia], glyphs[ib], device, self._options)
            glyphs[ia] = glyphs[ia].with_path(merged)
            glyphs[ib] = glyphs[ib].with_path("")
            used.update((ia, ib))
            return

        idx = find_glyph_index(glyphs, device.letter, used)
        if idx < 0:
            raise DeviceError(device.kind, device.target, "no matching glyph")
        if isinstance(device, NotchCut):
            path_d = apply_notch_cut(glyphs[idx], device, self._options)
        elif isinstance(device, SeamCut):
            path_d = apply_seam_cut(glyphs[idx], device, self._options)
        else:
            raise DeviceError(type(device).__name__, "?", "unsupported device")
        glyphs[idx] = glyphs[idx].with_path(path_d)
        used.add(idx)


def customize_wordmark(
    base: WordmarkBase,
    plan: CustomizationPlan,
    seed: str = "",
    settings: MarkforgeSettings | None = None,
) -> CustomizationResult:
    """Apply ``plan`` to ``base`` with a fresh customizer."""
    return WordmarkCustomizer(settings).customize(base, plan, seed)
