from __future__ import annotations

import logging
from dataclasses import replace

from lenticalib.api.report import log_report
from lenticalib.api.snapshot import CalibrationSnapshot, compute_projection_for, compute_snapshot
from lenticalib.config import CalibrationConfig, ConfigurationError

logger = logging.getLogger(__name__)


class CalibrationState:
    """
    Holds the current calibration snapshot and refreshes it once per frame.

    The first computation happens in the constructor and a ConfigurationError
    there propagates: there is no baseline to fall back to. After that a bad
    configuration is logged once, recorded in `last_error`, and the last valid
    snapshot stays in use until a good configuration comes back.
    """

    def __init__(self, config: CalibrationConfig | None = None) -> None:
        self._config = CalibrationConfig() if config is None else config
        self._last_error: ConfigurationError | None = None
        self._logged_error: str | None = None
        self._snapshot = compute_snapshot(self._config)
        if self._config.debug_print:
            log_report(self._snapshot)

    @property
    def config(self) -> CalibrationConfig:
        return self._config

    @property
    def snapshot(self) -> CalibrationSnapshot:
        return self._snapshot

    @property
    def last_error(self) -> ConfigurationError | None:
        return self._last_error

    @property
    def is_degraded(self) -> bool:
        return self._last_error is not None

    def refresh(self, config: CalibrationConfig | None = None) -> CalibrationSnapshot:
        """
        Recompute for `config` (or the held config) and return the current snapshot.

        With `lock_params` set the screen/lenticular/lightfield/view-map chain is
        skipped; the projection is still recomputed when `test_projection` is on.
        """
        if config is not None:
            self._config = config
        cfg = self._config
        try:
            if cfg.lock_params:
                snapshot = self._snapshot
                if cfg.test_projection:
                    snapshot = replace(snapshot, projection=compute_projection_for(cfg, snapshot.screen))
            else:
                snapshot = compute_snapshot(cfg, projection=self._snapshot.projection)
        except ConfigurationError as e:
            self._degrade(e)
            return self._snapshot

        self._snapshot = snapshot
        self._last_error = None
        self._logged_error = None
        if cfg.debug_print and not cfg.lock_params:
            log_report(snapshot)
        return snapshot

    def _degrade(self, error: ConfigurationError) -> None:
        self._last_error = error
        msg = str(error)
        if msg != self._logged_error:
            logger.warning("Calibration refresh failed, keeping last valid snapshot: %s", msg)
            self._logged_error = msg
