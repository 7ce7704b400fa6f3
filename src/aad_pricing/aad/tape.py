"""
Reverse-mode differentiation substrate for per-path adjoints.

Thin adapter over PyTorch autograd exposing the recording protocol the
simulation driver relies on:

    with tape.recording() as rec:       # begin_recording
        s0 = rec.wrap(initial_values)   # active inputs (leaf tensors)
        ...                             # ordinary torch arithmetic
        rec.seed_gradient(payoff, 1.0)
        rec.propagate_adjoints()        # reverse sweep
        ds0 = rec.read_gradient(s0)

Each recording owns its leaves. Leaves are created fresh inside the scope
and the autograd graph is released when the reverse sweep runs or the
scope exits, so nothing recorded on one path is visible on the next.

At most one recording may be open on a tape at a time.
"""

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Optional

import numpy as np
import torch

from aad_pricing.errors import RecordingError

logger = logging.getLogger(__name__)

#: All active numbers are double precision so values match a float64 run
DTYPE = torch.float64


class Recording:
    """
    One recording scope.

    Parameters
    ----------
    active : bool
        If False, wrapped numbers do not track gradients and the reverse
        sweep is a no-op (value-only pricing).
    """

    def __init__(self, active: bool = True):
        self.active = active
        self._inputs: list[torch.Tensor] = []
        self._output: Optional[torch.Tensor] = None
        self._seed: float = 0.0
        self._propagated = False
        self._closed = False

    @property
    def n_inputs(self) -> int:
        """Number of wrapped input vectors."""
        return len(self._inputs)

    @property
    def closed(self) -> bool:
        """Whether the scope has ended."""
        return self._closed

    def wrap(self, values: Sequence[float]) -> torch.Tensor:
        """
        Wrap plain numbers into a vector of active numbers.

        Parameters
        ----------
        values : Sequence[float]
            Plain numeric inputs

        Returns
        -------
        torch.Tensor
            1-D float64 leaf tensor; indexing it yields active scalars
        """
        self._check_open()
        leaf = torch.tensor(
            np.asarray(values, dtype=np.float64), dtype=DTYPE, requires_grad=self.active
        )
        self._inputs.append(leaf)
        return leaf

    def seed_gradient(self, output: object, seed: float = 1.0) -> None:
        """Set the adjoint of ``output`` that starts the reverse sweep."""
        self._check_open()
        self._output = output if isinstance(output, torch.Tensor) else None
        self._seed = float(seed)
        self._propagated = False

    def propagate_adjoints(self) -> None:
        """
        Run the reverse sweep from the seeded output.

        A constant output (e.g. a payoff whose averaging window saw no
        observations) has no recorded dependency on any input, so every
        gradient reads as zero.
        """
        self._check_open()
        if self._propagated:
            raise RecordingError("CRITICAL: adjoints already propagated in this recording")
        output = self._output
        if self.active and output is not None and output.requires_grad:
            torch.autograd.backward(output, grad_tensors=torch.full_like(output, self._seed))
        self._propagated = True

    def backward(self, output: object, seed: float = 1.0) -> None:
        """Seed the output adjoint and propagate in one call."""
        self.seed_gradient(output, seed)
        self.propagate_adjoints()

    def read_gradient(self, active: torch.Tensor) -> np.ndarray:
        """
        Gradient of the seeded output with respect to a wrapped input.

        Returns
        -------
        np.ndarray
            Same shape as ``active``; zeros for inputs the output does not
            depend on
        """
        self._check_open()
        if not self._propagated:
            raise RecordingError(
                "CRITICAL: read_gradient() called before propagate_adjoints()"
            )
        grad = active.grad
        if grad is None:
            return np.zeros(tuple(active.shape), dtype=np.float64)
        return grad.detach().cpu().numpy().copy()

    def _check_open(self) -> None:
        if self._closed:
            raise RecordingError("CRITICAL: recording scope already closed")

    def _close(self) -> None:
        # Dropping the references frees the autograd graph of this path.
        self._inputs.clear()
        self._output = None
        self._closed = True


class Tape:
    """
    Factory for path-scoped recordings.

    Examples
    --------
    >>> tape = Tape()
    >>> with tape.recording() as rec:
    ...     x = rec.wrap([2.0])
    ...     y = x[0] * x[0]
    ...     rec.backward(y)
    ...     rec.read_gradient(x)
    array([4.])
    """

    def __init__(self) -> None:
        self._current: Optional[Recording] = None
        self.recordings_opened = 0

    @property
    def is_recording(self) -> bool:
        """Whether a recording scope is currently open."""
        return self._current is not None

    @contextmanager
    def recording(self, active: bool = True) -> Iterator[Recording]:
        """
        Open a recording scope; it is closed on every exit path.

        Raises
        ------
        RecordingError
            If a recording is already open on this tape
        """
        if self._current is not None:
            raise RecordingError("CRITICAL: a recording is already open on this tape")

        rec = Recording(active=active)
        self._current = rec
        self.recordings_opened += 1
        grad_mode = torch.enable_grad() if active else torch.no_grad()
        try:
            with grad_mode:
                yield rec
        finally:
            rec._close()
            self._current = None
