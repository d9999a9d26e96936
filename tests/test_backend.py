"""Tests for backend name resolution.

Taichi is initialised once per session by conftest, so init_backend itself is
only exercised there.
"""

import pytest
import taichi as ti

from pathtracer.backend import init_backend, resolve_arch


class TestResolveArch:
    """Tests for resolve_arch."""

    @pytest.mark.parametrize("name,arch", [("cpu", ti.cpu), ("CUDA", ti.cuda), ("Vulkan", ti.vulkan)])
    def test_known_names(self, name, arch):
        assert resolve_arch(name) == arch

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown backend"):
            resolve_arch("tpu")


class TestInitBackend:
    """Tests for init_backend argument checks."""

    @pytest.mark.parametrize("threads", [0, -2])
    def test_rejects_non_positive_threads(self, threads):
        with pytest.raises(ValueError, match="num_threads"):
            init_backend(num_threads=threads)
