"""Service registry blueprint."""

from abc import ABC, abstractmethod

from dnsreg.base.service import ChangeResult, Service


class RegistryBlueprint(ABC):
    """Abstract interface every registry adapter implements.

    The host calls :meth:`ping` once, then registers and deregisters
    services as they start and stop.
    """

    @abstractmethod
    def ping(self) -> None:
        """Check connectivity and finish initialisation.

        Must succeed before any other operation is used.
        """

    @abstractmethod
    def register(self, service: Service) -> ChangeResult:
        """Publish *service*.

        Returns:
            Result carrying any secondary-record warnings.

        Raises:
            DNSRegError: If the primary record could not be written.
        """

    @abstractmethod
    def deregister(self, service: Service) -> ChangeResult:
        """Retract *service*; mirror of :meth:`register`."""

    @abstractmethod
    def services(self) -> list[Service]:
        """List the services this node currently has registered."""

    @abstractmethod
    def refresh(self, service: Service) -> None:
        """Renew *service*'s registration."""
