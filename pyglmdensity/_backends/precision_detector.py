"""
Detect whether a GPU can evaluate likelihoods in FP64 at full speed.

Likelihood kernels never drop to FP32: the gammaln sums of the gamma and
beta families lose several significant digits in single precision. A GPU
is only preferred when its FP64 throughput is close to its FP32 throughput.
"""

import warnings
from dataclasses import dataclass
from enum import Enum


class PrecisionSupport(Enum):
    """FP64 support level for hardware."""
    NO_GPU = "no_gpu"
    NO_FP64 = "no_fp64"          # Apple Metal
    GIMPED_FP64 = "gimped_fp64"  # Consumer and inference NVIDIA parts
    FULL_FP64 = "full_fp64"      # Data-center training parts


# FP64:FP32 throughput by NVIDIA product line; first match wins
_NVIDIA_FP64_RATIOS = (
    (('A100', 'A800', 'H100', 'H200', 'H800', 'B200', 'V100', 'P100'), 1 / 2),
    (('RTX 50', 'RTX 40', 'RTX 30', 'L40', 'L4', 'A10'), 1 / 64),
    (('RTX 20', 'GTX', 'T4'), 1 / 32),
)

# Ratios at or above this count as full-speed FP64
FULL_SPEED_RATIO = 1 / 4


@dataclass(frozen=True)
class GPUCapabilities:
    """
    Detected accelerator.

    Attributes
    ----------
    has_gpu : bool
    gpu_name : str
    gpu_type : str
        'cuda', 'metal', or 'none'
    fp64_support : PrecisionSupport
    fp64_throughput_ratio : float
        FP64:FP32 throughput (1.0 on CPU)
    """
    has_gpu: bool
    gpu_name: str
    gpu_type: str
    fp64_support: PrecisionSupport
    fp64_throughput_ratio: float

    @property
    def recommended_fp64(self) -> bool:
        return self.fp64_support is PrecisionSupport.FULL_FP64


CPU_ONLY = GPUCapabilities(
    has_gpu=False,
    gpu_name="CPU only",
    gpu_type="none",
    fp64_support=PrecisionSupport.NO_GPU,
    fp64_throughput_ratio=1.0,
)


def nvidia_fp64_ratio(gpu_name: str) -> float:
    """FP64:FP32 throughput for an NVIDIA device name (1/32 if unknown)."""
    upper = gpu_name.upper()
    for models, ratio in _NVIDIA_FP64_RATIOS:
        if any(model in upper for model in models):
            return ratio

    warnings.warn(f"Unknown NVIDIA GPU '{gpu_name}'. Assuming gimped FP64.")
    return 1 / 32


def detect_gpu_capabilities() -> GPUCapabilities:
    """
    Probe CUDA, then Metal, through torch.

    Returns CPU_ONLY when torch is not installed or no device is visible.
    """
    try:
        import torch
    except ImportError:
        return CPU_ONLY

    if torch.cuda.is_available():
        gpu_name = torch.cuda.get_device_name(0)
        ratio = nvidia_fp64_ratio(gpu_name)
        if ratio >= FULL_SPEED_RATIO:
            support = PrecisionSupport.FULL_FP64
        else:
            support = PrecisionSupport.GIMPED_FP64
        return GPUCapabilities(True, gpu_name, "cuda", support, ratio)

    mps = getattr(torch.backends, 'mps', None)
    if mps is not None and mps.is_available():
        return GPUCapabilities(True, "Apple Metal GPU", "metal", PrecisionSupport.NO_FP64, 0.0)

    return CPU_ONLY


def gpu_recommended(capabilities: GPUCapabilities) -> bool:
    """Whether auto-selection should prefer the GPU for FP64 evaluation."""
    return capabilities.has_gpu and capabilities.recommended_fp64


__all__ = [
    "PrecisionSupport",
    "GPUCapabilities",
    "CPU_ONLY",
    "detect_gpu_capabilities",
    "gpu_recommended",
    "nvidia_fp64_ratio",
]
