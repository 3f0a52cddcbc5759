"""
Dependency Injection Container.

Este módulo proporciona el contenedor de inyección de dependencias
que gestiona las instancias de infraestructura, servicios y casos de uso.

Clean Architecture: Este contenedor vive en la capa más externa y es el único
lugar donde se crean dependencias concretas.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from candlesim.application.ports.clock import IClock
from candlesim.application.services.simulation_manager import SimulationManager
from candlesim.application.use_cases.run_simulation_usecase import RunSimulationUseCase
from candlesim.application.use_cases.udf_history_usecase import GetUdfHistoryUseCase
from candlesim.domain.value_objects.simulation_config import SimulationConfig
from candlesim.infrastructure.external.event_bus import EventBus
from candlesim.infrastructure.system_clock import SystemClock
from candlesim.presentation.websocket.websocket_manager import WebSocketManager
from candlesim.shared.config.settings import Settings


@dataclass
class Container:
    """
    Contenedor de Inyección de Dependencias.

    Gestiona el ciclo de vida de todas las dependencias de la aplicación.
    Las capas internas dependen de abstracciones (IClock, IEventPublisher),
    no de implementaciones concretas.
    """

    # Configuración
    settings: Settings = field(default_factory=Settings)

    # Ports (implementaciones concretas)
    _clock: Optional[IClock] = None
    _event_bus: Optional[EventBus] = None

    # Servicios
    _simulations: Optional[SimulationManager] = None
    _udf_history: Optional[GetUdfHistoryUseCase] = None
    _ws_manager: Optional[WebSocketManager] = None

    # ==================== Ports ====================

    @property
    def clock(self) -> IClock:
        """Obtiene el reloj de pared (singleton)."""
        if self._clock is None:
            self._clock = SystemClock()
        return self._clock

    @property
    def event_bus(self) -> EventBus:
        """Obtiene el event bus (singleton)."""
        if self._event_bus is None:
            self._event_bus = EventBus(max_queue_size=self.settings.event_bus_max_queue_size)
        return self._event_bus

    # ==================== Use Cases ====================

    def get_run_simulation_usecase(self) -> RunSimulationUseCase:
        """
        Factory para RunSimulationUseCase.

        Cada llamada crea una nueva instancia para evitar estado compartido.
        """
        return RunSimulationUseCase(clock=self.clock, event_publisher=self.event_bus)

    @property
    def simulations(self) -> SimulationManager:
        """Obtiene el gestor de simulaciones por símbolo."""
        if self._simulations is None:
            self._simulations = SimulationManager(self.get_run_simulation_usecase)
        return self._simulations

    @property
    def udf_history(self) -> GetUdfHistoryUseCase:
        if self._udf_history is None:
            self._udf_history = GetUdfHistoryUseCase(
                max_bars=self.settings.udf_max_bars,
                volatility=self.settings.volatility,
                start_price=self.settings.start_price,
            )
        return self._udf_history

    @property
    def ws_manager(self) -> WebSocketManager:
        if self._ws_manager is None:
            self._ws_manager = WebSocketManager(self.event_bus)
        return self._ws_manager

    def default_config(self, symbol: str) -> SimulationConfig:
        """SimulationConfig para un símbolo con los defaults de settings."""
        return SimulationConfig(
            symbol=symbol,
            candle_duration_ms=self.settings.candle_duration_ms,
            history_length=self.settings.history_length,
            tick_interval_ms=self.settings.tick_interval_ms,
            volatility=self.settings.volatility,
            start_price=self.settings.start_price,
        )

    # ==================== Lifecycle ====================

    def reset(self) -> None:
        """Resetea todas las instancias (útil para tests)."""
        self._clock = None
        self._event_bus = None
        self._simulations = None
        self._udf_history = None
        self._ws_manager = None

    def override(self, name: str, instance: Any) -> None:
        """
        Override una dependencia (útil para tests con fakes).

        Args:
            name: Nombre de la dependencia (ej: 'clock')
            instance: Instancia a usar
        """
        attr_name = f"_{name}"
        if hasattr(self, attr_name):
            setattr(self, attr_name, instance)
        else:
            raise ValueError(f"Unknown dependency: {name}")


# ==================== Global Container ====================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Obtiene la instancia global del contenedor.

    Patrón Singleton para asegurar una única instancia
    compartida en toda la aplicación.
    """
    global _container
    if _container is None:
        _container = Container()
    return _container


def init_container(settings: Optional[Settings] = None) -> Container:
    """
    Inicializa el contenedor con configuración específica.

    Args:
        settings: Configuración opcional. Si es None, usa valores por defecto.

    Returns:
        Container inicializado
    """
    global _container
    if settings is None:
        settings = Settings()
    _container = Container(settings=settings)
    return _container


def reset_container() -> None:
    """Resetea el contenedor global (tests o reinicialización)."""
    global _container
    if _container is not None:
        _container.reset()
    _container = None
