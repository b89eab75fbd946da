"""Orbital model interface and orbital state resolution.

The pipeline never implements SGP4 itself. It talks to an ``OrbitalModel``,
which turns raw TLE lines into elements, initializes propagation constants
and steps them forward in minutes since epoch. ``Sgp4Model`` is the default
and wraps the ``sgp4`` package; tests inject deterministic fakes.

Models report bad input by raising ``ValueError``. ``resolve`` converts that
into ``ElementError`` so callers can tell a rejected record apart from a
structural parse failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from sgp4.api import SGP4_ERRORS, Satrec

from .tle_parser import Record

logger = logging.getLogger(__name__)


class OrbitalModel(Protocol):
    """Analytic orbital model used to resolve and step TLE records."""

    def elements_from_tle(self, name: Optional[str], line1: str, line2: str) -> Any:
        ...

    def constants_from_elements(self, elements: Any) -> Any:
        ...

    def epoch(self, elements: Any) -> float:
        """Element epoch as a UTC Julian date."""
        ...

    def propagate(self, constants: Any, minutes_since_epoch: float) -> tuple[float, float, float]:
        """TEME position (km) at ``minutes_since_epoch``."""
        ...


class ElementError(ValueError):
    """The orbital model rejected a record's element data.

    Attributes:
        record: The record that failed to resolve.
        diagnostic: Message reported by the model.
    """

    def __init__(self, record: Record, diagnostic: str) -> None:
        self.record = record
        self.diagnostic = diagnostic
        super().__init__(
            f"Invalid elements for {record.name or record.line1[:7]!r}: {diagnostic}"
        )


@dataclass(frozen=True)
class OrbitalState:
    """Initialized propagation state for one object.

    Attributes:
        name: Object name carried over from the record (may be ``None``).
        constants: Opaque propagation constants produced by the model.
        epoch_jd: Element epoch as a UTC Julian date.
        model: Model that produced ``constants`` and steps them.
    """

    name: Optional[str]
    constants: Any
    epoch_jd: float
    model: OrbitalModel


class Sgp4Model:
    """``OrbitalModel`` backed by the ``sgp4`` package (WGS72 constants)."""

    def elements_from_tle(self, name: Optional[str], line1: str, line2: str) -> Satrec:
        satrec = Satrec.twoline2rv(line1, line2)
        if satrec.error:
            raise ValueError(SGP4_ERRORS.get(satrec.error, f"SGP4 error {satrec.error}"))
        return satrec

    def constants_from_elements(self, elements: Satrec) -> Satrec:
        # twoline2rv already ran sgp4init; reject sets that cannot be stepped
        # at epoch, such as an already decayed orbit.
        err, _, _ = elements.sgp4_tsince(0.0)
        if err:
            raise ValueError(SGP4_ERRORS.get(err, f"SGP4 error {err}"))
        return elements

    def epoch(self, elements: Satrec) -> float:
        return elements.jdsatepoch + elements.jdsatepochF

    def propagate(self, constants: Satrec, minutes_since_epoch: float) -> tuple[float, float, float]:
        err, position, _ = constants.sgp4_tsince(minutes_since_epoch)
        if err:
            raise ValueError(SGP4_ERRORS.get(err, f"SGP4 error {err}"))
        return position


def resolve(record: Record, model: Optional[OrbitalModel] = None) -> OrbitalState:
    """Build an orbital state for ``record``.

    The record lines are passed to the model verbatim. The name is kept as
    given; defaulting happens when the trajectory is assembled.

    Args:
        record: Parsed TLE record.
        model: Orbital model to use (defaults to ``Sgp4Model``).

    Returns:
        Orbital state ready for propagation.

    Raises:
        ElementError: The model rejected the record.
    """
    model = model or Sgp4Model()
    try:
        elements = model.elements_from_tle(record.name, record.line1, record.line2)
        constants = model.constants_from_elements(elements)
        epoch_jd = model.epoch(elements)
    except ValueError as exc:
        raise ElementError(record, str(exc)) from exc

    logger.debug("Resolved %s (epoch JD %.6f)", record.name or record.line1[:7], epoch_jd)
    return OrbitalState(
        name=record.name,
        constants=constants,
        epoch_jd=epoch_jd,
        model=model,
    )
