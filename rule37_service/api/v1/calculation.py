"""POST /v1/rule37/calculate - Rule 37 interest and ITC reversal endpoints"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException

from rule37_service.api.v1.schemas import (
    BatchCalculationRequest,
    BatchCalculationResponse,
    CalculationRequest,
    CalculationSummarySchema,
    LedgerResultSchema,
)
from rule37_service.api.dependencies import get_request_id
from rule37_service.domain.calculation import calculate_interest, calculate_ledgers
from rule37_service.domain.exceptions import DomainException
from rule37_service.infrastructure.observability.metrics import record_calculation
from rule37_service.infrastructure.observability.logging import log_calculation

router = APIRouter()


@router.post("/rule37/calculate", response_model=CalculationSummarySchema)
def calculate(
    request_body: CalculationRequest,
    request_id: str = Depends(get_request_id),
):
    """
    Compute Rule 37 interest and ITC reversal for a single ledger.

    Flow:
    1. Convert validated entries to domain ledger entries
    2. FIFO-match purchases to payments per supplier
    3. Classify unmatched purchases as AT_RISK / BREACHED
    4. Return summary with row-level details
    """
    start_time = time.time()

    try:
        entries = [entry.to_domain() for entry in request_body.entries]
        summary = calculate_interest(entries, request_body.as_of_date)

        duration_ms = (time.time() - start_time) * 1000
        record_calculation(summary, endpoint="single")
        log_calculation(
            request_id,
            ledger_count=1,
            entry_count=len(entries),
            row_count=len(summary.details),
            breached_count=summary.breached_count,
            at_risk_count=summary.at_risk_count,
            duration_ms=duration_ms,
        )

        return CalculationSummarySchema.from_domain(summary)

    except DomainException as e:
        logging.warning(f"Invalid ledger data: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/rule37/calculate/batch", response_model=BatchCalculationResponse)
def calculate_batch(
    request_body: BatchCalculationRequest,
    request_id: str = Depends(get_request_id),
):
    """
    Compute Rule 37 results for several ledgers in one request.

    Each ledger is calculated independently; totals are summed across ledgers.
    Ledger names must be unique within the request.
    """
    start_time = time.time()

    names = [ledger.ledger_name for ledger in request_body.ledgers]
    if len(set(names)) != len(names):
        raise HTTPException(status_code=422, detail="Duplicate ledger_name in request")

    try:
        ledgers = {
            ledger.ledger_name: [entry.to_domain() for entry in ledger.entries]
            for ledger in request_body.ledgers
        }
        batch = calculate_ledgers(ledgers, request_body.as_of_date)

        for result in batch.results:
            record_calculation(result.summary, endpoint="batch")

        duration_ms = (time.time() - start_time) * 1000
        log_calculation(
            request_id,
            ledger_count=len(batch.results),
            entry_count=sum(len(entries) for entries in ledgers.values()),
            row_count=sum(len(r.summary.details) for r in batch.results),
            breached_count=sum(r.summary.breached_count for r in batch.results),
            at_risk_count=sum(r.summary.at_risk_count for r in batch.results),
            duration_ms=duration_ms,
        )

        return BatchCalculationResponse(
            results=[
                LedgerResultSchema(
                    ledger_name=r.ledger_name,
                    summary=CalculationSummarySchema.from_domain(r.summary),
                )
                for r in batch.results
            ],
            total_interest=batch.total_interest,
            total_itc_reversal=batch.total_itc_reversal,
        )

    except DomainException as e:
        logging.warning(f"Invalid ledger data: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
