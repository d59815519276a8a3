from typing import Annotated

from fastapi import Depends

from app.core.destination import ConnectorRegistry, get_connector_registry

RegistryDep = Annotated[ConnectorRegistry, Depends(get_connector_registry)]
