"""Shipping validation catalog.

Static reference data for the wizard: which carriers exist, which
services each carrier supports and which label sizes are allowed.
All lookups are case-insensitive and ignore surrounding whitespace.
"""

from dataclasses import dataclass, field


def _norm(value: str | None) -> str:
    return (value or "").strip().lower()


@dataclass(frozen=True)
class ValidationCatalog:
    """Closed sets of carriers, services and label sizes.

    Attributes:
        carrier_services: Carrier name -> supported services, canonical spelling.
        label_sizes: Allowed label sizes, canonical (lowercase) spelling.
    """

    carrier_services: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: {
            "UPS": ("Ground", "2Day"),
            "FedEx": ("Overnight", "Air"),
        }
    )
    label_sizes: tuple[str, ...] = ("4x6", "6x9")

    def canonical_carrier(self, name: str | None) -> str | None:
        """Get the catalog spelling of a carrier, or None if unknown."""
        wanted = _norm(name)
        if not wanted:
            return None
        for carrier in self.carrier_services:
            if carrier.lower() == wanted:
                return carrier
        return None

    def canonical_service(self, carrier: str | None, service: str | None) -> str | None:
        """Get the catalog spelling of a carrier's service, or None if unsupported."""
        canonical = self.canonical_carrier(carrier)
        wanted = _norm(service)
        if canonical is None or not wanted:
            return None
        for svc in self.carrier_services[canonical]:
            if svc.lower() == wanted:
                return svc
        return None

    def normalize_label_size(self, size: str | None) -> str | None:
        """Get the catalog spelling of a label size, or None if not allowed."""
        wanted = _norm(size)
        return wanted if wanted in self.label_sizes else None

    def is_valid_carrier(self, name: str | None) -> bool:
        return self.canonical_carrier(name) is not None

    def is_valid_service(self, carrier: str | None, service: str | None) -> bool:
        return self.canonical_service(carrier, service) is not None

    def is_valid_label_size(self, size: str | None) -> bool:
        return self.normalize_label_size(size) is not None

    def carriers(self) -> list[str]:
        return list(self.carrier_services)

    def services_for(self, carrier: str | None) -> list[str]:
        """List services for a carrier; empty when the carrier is unknown."""
        canonical = self.canonical_carrier(carrier)
        if canonical is None:
            return []
        return sorted(self.carrier_services[canonical], key=str.lower)

    def supported(self) -> dict[str, object]:
        """Everything the catalog accepts, for listing to callers."""
        return {
            "carriers": {
                carrier: sorted(services, key=str.lower)
                for carrier, services in self.carrier_services.items()
            },
            "label_sizes": sorted(self.label_sizes),
        }
