"""Analysis routes — time-domain response, transfer function, Bode data."""

import logging
import math
import os

from fastapi import APIRouter, HTTPException

from rlc_api.models import (
    FrequencyResponseRequest,
    FrequencyResponseResponse,
    RLCValues,
    ResponseRequest,
    ResponseResponse,
    TransferFunctionResponse,
)
from rlc_engine.parameters import CircuitParameters, InvalidParameterError, validate_time_grid
from rlc_engine.presets import auto_duration, auto_time_step
from rlc_engine.response import compute_response
from rlc_engine.transfer import compute_transfer_function, frequency_response, generate_frequencies

logger = logging.getLogger(__name__)

# Upper bound on samples per request; the response is returned as JSON lists
MAX_SAMPLES = int(os.getenv("MAX_SAMPLES", "20000"))

router = APIRouter()


def _reject(exc: InvalidParameterError) -> HTTPException:
    logger.warning("Rejected circuit parameters: %s", exc)
    return HTTPException(status_code=422, detail=str(exc))


@router.post("/response", response_model=ResponseResponse)
async def circuit_response(request: ResponseRequest):
    """Compute the step or impulse response of an RC, RL or RLC circuit."""
    params = CircuitParameters(
        R=request.params.R,
        L=request.params.L,
        C=request.params.C,
        source_amplitude=request.params.source_amplitude,
    )

    try:
        duration = request.duration
        if duration is None:
            duration = auto_duration(request.topology, params)
        time_step = request.time_step
        if time_step is None:
            time_step = auto_time_step(duration) if duration > 0 else 1.0

        validate_time_grid(time_step, duration)
        num_points = math.floor(duration / time_step) + 1
        if num_points > MAX_SAMPLES:
            raise HTTPException(
                status_code=422,
                detail=f"Requested {num_points} samples; the limit is {MAX_SAMPLES}. Increase time_step or shorten duration.",
            )

        result = compute_response(request.topology, params, time_step, duration, request.input_type)
    except InvalidParameterError as e:
        raise _reject(e)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Response calculation failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Response calculation failed.")

    return ResponseResponse(**result.to_dict())


@router.post("/transfer-function", response_model=TransferFunctionResponse)
async def transfer_function(request: RLCValues):
    """Transfer function H(s) of a series RLC circuit with its poles and zeros."""
    try:
        tf = compute_transfer_function(request.R, request.L, request.C)
    except InvalidParameterError as e:
        raise _reject(e)

    return TransferFunctionResponse(**tf.to_dict())


@router.post("/frequency-response", response_model=FrequencyResponseResponse)
async def bode(request: FrequencyResponseRequest):
    """Magnitude (dB) and phase (degrees) of H(j2πf) over a log-spaced sweep."""
    if request.freq_end <= request.freq_start:
        raise HTTPException(status_code=422, detail="freq_end must be greater than freq_start")

    try:
        tf = compute_transfer_function(request.R, request.L, request.C)
        freqs = generate_frequencies(request.freq_start, request.freq_end, request.num_points)
        result = frequency_response(tf, freqs)
    except InvalidParameterError as e:
        raise _reject(e)

    return FrequencyResponseResponse(**result)
