"""
Backend selection and management.

Provides a unified interface for the CPU (NumPy/SciPy) and PyTorch FP64
likelihood backends.

Resolution order for ``get_backend('auto')`` (first match wins):
    1. The ``PYGLMDENSITY_BACKEND`` environment variable (``cpu`` or
       ``pytorch``).
    2. PyTorch, if a CUDA GPU with full-speed FP64 is detected.
    3. CPU.
"""

import os
import warnings
from typing import Optional

from .base import BackendBase
from .precision_detector import (
    detect_gpu_capabilities,
    gpu_recommended,
    GPUCapabilities
)

ENV_VAR = "PYGLMDENSITY_BACKEND"

# Try importing CPU backend (always available)
try:
    from .cpu_fp64_backend import CPUBackendFP64
    CPU_AVAILABLE = True
except ImportError:
    CPU_AVAILABLE = False
    warnings.warn("CPU backend unavailable - installation error!")

# The PyTorch backend module imports torch lazily
try:
    import torch  # noqa: F401
    from .gpu_fp64_backend import PyTorchBackendFP64
    PYTORCH_AVAILABLE = True
except ImportError:
    PYTORCH_AVAILABLE = False


def _cpu() -> BackendBase:
    if not CPU_AVAILABLE:
        raise RuntimeError("CPU backend unavailable!")
    return CPUBackendFP64()


def get_backend(backend: str = 'auto', device: Optional[str] = None) -> BackendBase:
    """
    Get computational backend.

    Parameters
    ----------
    backend : str or BackendBase
        Backend selection:
        - 'auto': environment override, then GPU if it has full FP64, else CPU
        - 'cpu': CPU with NumPy/SciPy (FP64)
        - 'pytorch' (alias 'gpu'): PyTorch FP64
        A BackendBase instance is returned unchanged.
    device : str, optional
        Torch device for the PyTorch backend (e.g. 'cuda:1', 'cpu')

    Returns
    -------
    BackendBase
        Backend instance

    Examples
    --------
    >>> backend = get_backend('auto')
    >>> backend = get_backend('cpu')
    >>> backend = get_backend('pytorch', device='cpu')
    """
    if isinstance(backend, BackendBase):
        return backend

    name = backend.strip().lower()

    if name == 'auto':
        env = os.environ.get(ENV_VAR, "").strip().lower()
        if env in ('cpu', 'pytorch', 'gpu'):
            return get_backend(env, device=device)
        if env:
            warnings.warn(
                f"Ignoring {ENV_VAR}={env!r}; valid values are 'cpu' and 'pytorch'"
            )

        if PYTORCH_AVAILABLE and gpu_recommended(detect_gpu_capabilities()):
            return PyTorchBackendFP64(device=device)
        return _cpu()

    elif name == 'cpu':
        return _cpu()

    elif name in ('pytorch', 'gpu'):
        if not PYTORCH_AVAILABLE:
            raise RuntimeError(
                "PyTorch backend unavailable.\n"
                "Install: pip install torch"
            )
        return PyTorchBackendFP64(device=device)

    else:
        raise ValueError(
            f"Unknown backend: '{backend}'\n"
            f"Valid options: 'auto', 'cpu', 'pytorch'"
        )


def list_available_backends() -> list:
    """List names of available backends."""
    backends = []
    if CPU_AVAILABLE:
        backends.append('cpu')
    if PYTORCH_AVAILABLE:
        backends.append('pytorch')
    return backends


def print_backend_info():
    """Print detailed backend information (diagnostic)."""
    caps = detect_gpu_capabilities()

    print("PyGLMDensity Backend Status")
    print("=" * 50)
    print(f"\nAvailable Backends:")
    print(f"  CPU (FP64):          {'✓' if CPU_AVAILABLE else '✗'} - NumPy/SciPy kernels")
    print(f"  PyTorch (FP64):      {'✓' if PYTORCH_AVAILABLE else '✗'} - torch kernels")

    print(f"\nHardware Detection:")
    if caps.has_gpu:
        print(f"  GPU Type: {caps.gpu_type}")
        print(f"  GPU Name: {caps.gpu_name}")
        print(f"  FP64 Support: {caps.fp64_support.value}")
    else:
        print(f"  No GPU detected")

    print(f"\nRecommended Backend:")
    try:
        backend = get_backend('auto')
        print(f"  {backend.name}")
    except Exception as e:
        print(f"  Error: {e}")


__all__ = [
    'get_backend',
    'list_available_backends',
    'print_backend_info',
    'BackendBase',
    'GPUCapabilities',
    'detect_gpu_capabilities',
    'CPU_AVAILABLE',
    'PYTORCH_AVAILABLE',
]


if __name__ == "__main__":
    print_backend_info()
