"""
Exponential Atmosphere Model
============================
Air density falls off exponentially with altitude:

    ρ(h) = ρ0 · exp(−h / H)

where ρ0 is the sea-level density and H the scale height. An isothermal
atmosphere has exactly this profile; for Earth H ≈ 8.5 km.

``ConstantAtmosphere`` holds ρ at ρ0 for every altitude. It is the
reference used to compare altitude-dependent drag against constant drag.
"""

from dataclasses import dataclass

import numpy as np

from .config import SEA_LEVEL_DENSITY, SCALE_HEIGHT
from .errors import ConfigurationError


def exponential_density(altitude: float, rho0: float = SEA_LEVEL_DENSITY,
                        scale_height: float = SCALE_HEIGHT) -> float:
    """
    Air density (kg/m³) at a given altitude (m).
    """
    if not scale_height > 0:
        raise ConfigurationError('scale_height', scale_height,
                                 "scale height must be > 0")
    return float(rho0 * np.exp(-altitude / scale_height))


@dataclass(frozen=True)
class ExponentialAtmosphere:
    """Altitude-dependent density profile."""
    rho0: float = SEA_LEVEL_DENSITY          # kg/m³
    scale_height: float = SCALE_HEIGHT       # m

    def __post_init__(self):
        if not self.scale_height > 0:
            raise ConfigurationError('scale_height', self.scale_height,
                                     "scale height must be > 0")
        if not self.rho0 >= 0:
            raise ConfigurationError('rho0', self.rho0,
                                     "sea-level density must be >= 0")

    def density(self, altitude: float) -> float:
        return float(self.rho0 * np.exp(-altitude / self.scale_height))

    def density_profile(self, alt_array) -> np.ndarray:
        """Vectorized density for an array of altitudes."""
        alt_array = np.asarray(alt_array, dtype=float)
        return self.rho0 * np.exp(-alt_array / self.scale_height)


@dataclass(frozen=True)
class ConstantAtmosphere:
    """Density fixed at the sea-level value."""
    rho0: float = SEA_LEVEL_DENSITY

    def __post_init__(self):
        if not self.rho0 >= 0:
            raise ConfigurationError('rho0', self.rho0,
                                     "sea-level density must be >= 0")

    def density(self, altitude: float) -> float:
        return float(self.rho0)

    def density_profile(self, alt_array) -> np.ndarray:
        return np.full(np.shape(alt_array), float(self.rho0))


if __name__ == "__main__":
    atm = ExponentialAtmosphere()
    print("Exponential Atmosphere")
    print("=" * 30)
    print(f"{'Alt (m)':>10} {'ρ (kg/m³)':>12}")
    print("-" * 30)
    for h in [0, 1000, 5000, 8500, 10000, 20000]:
        print(f"{h:>10.0f} {atm.density(h):>12.5f}")
