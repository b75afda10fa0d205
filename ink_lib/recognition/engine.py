"""Inference engine adapters.

The recognizer treats the model runtime as a black box: it hands over a
float tensor of shape [1, M, M, 1] with values in [0, 1] and gets back one
raw score per class, aligned with the label list. This module defines that
contract and a PyTorch implementation of it.

Classes:
    InferenceEngine: Protocol every engine satisfies.
    CallableInferenceEngine: Adapts a plain function (ONNX sessions,
        test doubles, remote calls).
    TorchInferenceEngine: Runs a torch.nn.Module or TorchScript file.

Usage::

    engine = TorchInferenceEngine.from_file('etlcb_9b_model.pt')
    scores = engine.run(tensor)      # np.ndarray, shape (N,)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Protocol

import numpy as np
import torch
import torch.nn as nn

from ..errors import InitializationError

logger = logging.getLogger(__name__)


class InferenceEngine(Protocol):
    """Runs the character model on one encoded input.

    ``run`` receives a float32 array of shape (1, M, M, 1) and returns a
    1-D float array of per-class scores. Runtime failures propagate as
    whatever exception the engine raises; the recognizer wraps them.
    """

    def run(self, tensor: np.ndarray) -> np.ndarray:
        ...


class CallableInferenceEngine:
    """Wrap a function ``fn(tensor) -> scores`` as an engine."""

    def __init__(self, fn: Callable[[np.ndarray], object]):
        self.fn = fn

    def run(self, tensor: np.ndarray) -> np.ndarray:
        return np.asarray(self.fn(tensor), dtype=np.float32).reshape(-1)


class TorchInferenceEngine:
    """PyTorch engine for a pretrained character model.

    Attributes:
        model: Module in eval mode on ``device``.
        device: PyTorch device (CPU or CUDA).
        channels_first: Permute NHWC input to NCHW before the forward
            pass, for models built with torch convolution layout.
    """

    def __init__(self, model: nn.Module, device: Optional[str] = None,
                 channels_first: bool = True):
        """Initialize the engine.

        Args:
            model: Trained module returning (1, N) scores.
            device: PyTorch device string ('cuda', 'cpu'), or None
                for automatic detection based on CUDA availability.
            channels_first: See class attributes.
        """
        if device is None:
            device = 'cuda' if torch.cuda.is_available() else 'cpu'
        self.device = torch.device(device)
        self.channels_first = channels_first
        self.model = model.to(self.device)
        self.model.eval()

    @classmethod
    def from_file(cls, model_path: str | Path, device: Optional[str] = None,
                  channels_first: bool = True) -> TorchInferenceEngine:
        """Load a TorchScript model.

        Raises:
            InitializationError: If the file is missing or cannot be loaded.
        """
        model_path = Path(model_path)
        if not model_path.exists():
            raise InitializationError(f"Model file not found: {model_path}")
        if device is None:
            device = 'cuda' if torch.cuda.is_available() else 'cpu'
        logger.info("Loading model from %s on %s", model_path, device)
        try:
            model = torch.jit.load(str(model_path), map_location=device)
        except (RuntimeError, ValueError, OSError) as exc:
            raise InitializationError(f"Failed to load model {model_path}: {exc}") from exc
        return cls(model, device=device, channels_first=channels_first)

    def run(self, tensor: np.ndarray) -> np.ndarray:
        x = torch.from_numpy(np.ascontiguousarray(tensor, dtype=np.float32))
        if self.channels_first:
            x = x.permute(0, 3, 1, 2).contiguous()
        x = x.to(self.device)
        with torch.no_grad():
            out = self.model(x)
        # Batched (1, N) or bare (N,) output
        if out.dim() > 1:
            out = out[0]
        return out.detach().cpu().numpy().astype(np.float32).reshape(-1)
