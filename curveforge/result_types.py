"""
CurveForge - Ergebnis-Typ für Neuberechnungen
=============================================

Eine Neuberechnung (rebuild) ist alles-oder-nichts: entweder liegt die
komplette Geometrie vor, oder die Konfiguration wurde abgelehnt. Es gibt
kein Teilergebnis und keinen Retry.

Verwendung:
    result = curve.rebuild()
    if result.is_success:
        upload(result.value)
    else:
        result.log("Kurve")

    points = result.unwrap()   # wirft den ursprünglichen Fehler erneut
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from loguru import logger


class ResultStatus(Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class OperationResult:
    """
    Ergebnis einer kompletten Kurven-/Flächen-Neuberechnung.

    Attributes:
        status: SUCCESS oder ERROR
        value: Punktliste bzw. SurfaceMesh, None bei ERROR
        message: Kurzbeschreibung für Log und Host-UI
        details: Zusatzinfos (Fehlertyp, Kontext)
        exception: auslösender Fehler bei ERROR
    """
    status: ResultStatus
    value: Any = None
    message: str = ""
    details: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[Exception] = field(default=None, repr=False)

    @classmethod
    def success(cls, value: Any, message: str = "Neuberechnung abgeschlossen") -> "OperationResult":
        return cls(status=ResultStatus.SUCCESS, value=value, message=message)

    @classmethod
    def error(cls, message: str, exception: Exception = None,
              context: Dict[str, Any] = None) -> "OperationResult":
        """
        Abgelehnte Konfiguration.

        Args:
            message: Was ist ungültig
            exception: Auslösender Fehler (Typ und Text landen in details)
            context: Weitere Werte für die Fehlersuche
        """
        details = dict(context or {})
        if exception is not None:
            details["exception_type"] = type(exception).__name__
            details["exception_message"] = str(exception)
        return cls(status=ResultStatus.ERROR, message=message, details=details, exception=exception)

    @property
    def is_success(self) -> bool:
        return self.status is ResultStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status is ResultStatus.ERROR

    def unwrap(self) -> Any:
        """
        Liefert value oder wirft den auslösenden Fehler erneut.

        Raises:
            Exception: der gespeicherte Fehler, sonst RuntimeError
        """
        if self.is_success:
            return self.value
        if self.exception is not None:
            raise self.exception
        raise RuntimeError(self.message)

    def log(self, context: str = "") -> "OperationResult":
        """Loggt SUCCESS als success, ERROR als error. Gibt self zurück."""
        prefix = f"[{context}] " if context else ""

        if self.is_success:
            logger.success(f"{prefix}{self.message}")
            return self

        logger.error(f"{prefix}{self.message}")
        if "exception_type" in self.details:
            logger.error(f"{prefix}  Exception: {self.details['exception_type']}: "
                         f"{self.details.get('exception_message', '')}")
        return self

    def to_report_dict(self) -> Dict[str, Any]:
        """Flaches Dict für Test-Reports."""
        report = {"status": self.status.name, "message": self.message}
        if self.details:
            report["details"] = dict(self.details)
        if self.value is not None:
            report["value_type"] = type(self.value).__name__
        return report

    def __repr__(self) -> str:
        if not self.message:
            return f"OperationResult({self.status.name})"
        return f"OperationResult({self.status.name}, message='{self.message[:50]}')"
