"""Component physics routes — element values from geometry, material table."""

import logging

from fastapi import APIRouter, HTTPException

from rlc_api.models import ElementRequest, ElementResponse, ElementType, MaterialInfo, MaterialListResponse
from rlc_engine.physics import MATERIALS, capacitance, get_material, inductance, resistance

logger = logging.getLogger(__name__)

router = APIRouter()

# Material property each element needs, and its unit
_ELEMENT_PROPERTY = {
    ElementType.RESISTOR: ("resistivity", "Ω"),
    ElementType.CAPACITOR: ("permittivity", "F"),
    ElementType.INDUCTOR: ("permeability", "H"),
}


@router.get("/physics/materials", response_model=MaterialListResponse)
async def list_materials():
    materials = [
        MaterialInfo(
            name=m.name,
            resistivity=m.resistivity,
            permittivity=m.permittivity,
            permeability=m.permeability,
        )
        for m in MATERIALS.values()
    ]
    return MaterialListResponse(materials=materials, total=len(materials))


@router.post("/physics/element", response_model=ElementResponse)
async def element_value(request: ElementRequest):
    """Compute R, C or L from material properties and geometry."""
    prop, unit = _ELEMENT_PROPERTY[request.element]

    value = getattr(request, prop)
    try:
        if value is None and request.material:
            value = getattr(get_material(request.material), prop)
        if value is None:
            raise ValueError(f"{prop} is required (directly or via a material that defines it)")

        if request.element is ElementType.RESISTOR:
            result = resistance(value, request.length, request.area)
        elif request.element is ElementType.CAPACITOR:
            result = capacitance(value, request.area, request.distance)
        else:
            result = inductance(value, request.turns, request.area, request.length)
    except (ValueError, TypeError) as e:
        logger.warning("Element calculation rejected: %s", e)
        raise HTTPException(status_code=422, detail=str(e))

    return ElementResponse(element=request.element, value=result, unit=unit)
