"""Tax API — capital gains for a tax year and their exports."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response, StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from coinbasis.accounting.capital_gains import CapitalGainsEngine
from coinbasis.api.deps import get_db, resolve_user
from coinbasis.api.schemas.tax import CapitalGainItemResponse, CapitalGainsResponse
from coinbasis.config import settings
from coinbasis.db.models.user import User
from coinbasis.domain.enums import ExportFormat
from coinbasis.report.csv_writer import write_csv
from coinbasis.report.excel_writer import ExcelWriter

router = APIRouter(prefix="/api/tax", tags=["tax"])

DbDep = Annotated[AsyncSession, Depends(get_db)]

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/capital-gains", response_model=CapitalGainsResponse)
async def get_capital_gains(
    db: DbDep,
    user: User = Depends(resolve_user),
    tax_year: int = Query(..., ge=2009, le=2100),
    method: str = Query(settings.default_cost_basis_method, description="FIFO, LIFO or HIFO"),
) -> CapitalGainsResponse:
    """Realized gains and losses for the tax year. Unknown methods are ordered like FIFO."""
    result = await CapitalGainsEngine(db).calculate(user.id, tax_year, method)
    return CapitalGainsResponse(
        tax_year=tax_year,
        method=method,
        short_term_gains=result.short_term_gains,
        short_term_losses=result.short_term_losses,
        long_term_gains=result.long_term_gains,
        long_term_losses=result.long_term_losses,
        total_gains=result.total_gains,
        total_losses=result.total_losses,
        net_gain_loss=result.net_gain_loss,
        transactions_included=result.transactions_included,
        items=[
            CapitalGainItemResponse(
                **item.model_dump(),
                unknown_cost_basis=item.has_unknown_basis,
            )
            for item in result.items
        ],
    )


@router.get("/capital-gains/export")
async def export_capital_gains(
    db: DbDep,
    user: User = Depends(resolve_user),
    tax_year: int = Query(..., ge=2009, le=2100),
    method: str = Query(settings.default_cost_basis_method),
    format: ExportFormat = Query(ExportFormat.FORM_8949),
) -> Response:
    """Download the capital gains as CSV (Form 8949 / TurboTax / TaxAct) or Excel."""
    result = await CapitalGainsEngine(db).calculate(user.id, tax_year, method)

    if format == ExportFormat.XLSX:
        buf = ExcelWriter().write_to_buffer(result, tax_year)
        return StreamingResponse(
            buf,
            media_type=XLSX_CONTENT_TYPE,
            headers={"Content-Disposition": f'attachment; filename="capital_gains_{tax_year}.xlsx"'},
        )

    content = write_csv(result.items, tax_year, format)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{format.value}_{tax_year}.csv"'},
    )
