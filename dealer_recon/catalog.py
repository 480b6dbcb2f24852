"""Vehicle model catalog used to label orders."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from dealer_recon.models import NormalizedOrder
from dealer_recon.reconcile.parsing import parse_int, pick

logger = logging.getLogger(__name__)


class VehicleCatalog:
    """Model id to model name lookup with an explicit loaded state.

    A catalog starts empty and not loaded. Until ``load`` is called,
    ``name_for`` returns None and labels fall back to ids, so nothing
    depends on when the catalog finished loading.
    """

    def __init__(self, models: Iterable[Mapping[str, Any]] | None = None) -> None:
        self._names: dict[int, str] = {}
        self._loaded = False
        if models is not None:
            self.load(models)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self, models: Iterable[Mapping[str, Any]]) -> None:
        """Replace the catalog contents with ``models`` and mark it loaded."""
        names: dict[int, str] = {}
        for model in models:
            model_id = parse_int(pick(model, "modelId", "model_id", "id"))
            name = pick(model, "modelName", "model_name", "name")
            if model_id is None or name is None:
                continue
            names[model_id] = str(name)
        self._names = names
        self._loaded = True
        logger.debug("Vehicle catalog loaded with %d models", len(names))

    def name_for(self, model_id: int | None) -> str | None:
        if not self._loaded or model_id is None:
            return None
        return self._names.get(model_id)

    def label_for(self, order: NormalizedOrder) -> str:
        """Human-readable vehicle label for an order."""
        name = self.name_for(order.model_id)
        if name is None and order.model_id is not None:
            name = f"Model ID: {order.model_id}"
        if name is not None:
            return f"{name} (Serial: {order.serial_id})" if order.serial_id else name
        if order.serial_id:
            return f"Serial: {order.serial_id}"
        return "Unknown Vehicle"

    def __len__(self) -> int:
        return len(self._names)
