"""Quote Line API Routes

FastAPI routes driving the quote line editor of a quote. Every command
returns the editor state together with the notifications it produced.
"""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from libs.result import Error
from src.api.error import ClientError
from src.api.schemas.quote_line_request import (
    InsertRowSchema,
    OverallDiscountSchema,
    RowIndexSchema,
    SearchSchema,
    SelectProductSchema,
    SuggestionsSchema,
    UpdateFieldSchema,
)
from src.app.use_cases.quote_lines.dtos import QuoteLinesStateDTO
from src.app.use_cases.quote_lines.load_line_items import LoadQuoteLineItems
from src.app.use_cases.quote_lines.save_line_items import SaveQuoteLineItems
from src.adapter.repositories.quote_line_item_repository import SqlAlchemyQuoteLineItemRepository
from src.adapter.repositories.quote_repository import SqlAlchemyQuoteRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import EditorRegistry, EditorSession, get_editor_registry, get_session
from src.domain.catalog_product import CatalogProduct

router = APIRouter(prefix="/quotes/{quote_id}", tags=["Quote Lines"])

_SESSION_NOT_FOUND = {
    404: {
        "description": "No editing session for the quote",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "SESSION_NOT_FOUND",
                        "message": "Quote q-123 is not loaded"
                    }
                }
            }
        }
    }
}


def _editor_session(quote_id: str, registry: EditorRegistry) -> EditorSession:
    session = registry.get(quote_id)
    if session is None:
        raise ClientError(
            Error(code="SESSION_NOT_FOUND", message=f"Quote {quote_id} is not loaded"),
            status_code=status.HTTP_404_NOT_FOUND,
        )
    return session


def _state(session: EditorSession) -> QuoteLinesStateDTO:
    return session.editor.state(session.buffer.drain())


def _row_not_found(quote_id: str, local_id: int) -> ClientError:
    return ClientError(
        Error(code="ROW_NOT_FOUND", message=f"Row {local_id} not found in quote {quote_id}"),
        status_code=status.HTTP_404_NOT_FOUND,
    )


@router.post(
    "/lines/load",
    response_model=QuoteLinesStateDTO,
    status_code=status.HTTP_200_OK,
)
async def load_lines(
    quote_id: str,
    registry: EditorRegistry = Depends(get_editor_registry),
    session: AsyncSession = Depends(get_session),
):
    """
    Open (or reopen) the editing session of a quote.

    Replaces the rows with the persisted line items. A quote without lines
    starts with one blank row in edit mode. Unsaved changes of an open
    session are discarded.

    **Path parameters:**
    - `quote_id` (required): Quote identifier

    **Returns:**
    - 200: Editor state; a load failure is reported as an error notification
      and leaves a single blank row
    """
    editor_session = registry.get_or_create(quote_id)
    use_case = LoadQuoteLineItems(SqlAlchemyQuoteLineItemRepository(session))
    await editor_session.editor.load(use_case)
    return _state(editor_session)


@router.get(
    "/lines",
    response_model=QuoteLinesStateDTO,
    responses=_SESSION_NOT_FOUND,
)
async def get_lines(
    quote_id: str,
    registry: EditorRegistry = Depends(get_editor_registry),
):
    """Current editor state, including notifications from deferred work"""
    return _state(_editor_session(quote_id, registry))


@router.post("/lines/select", response_model=QuoteLinesStateDTO, responses=_SESSION_NOT_FOUND)
async def select_line(
    quote_id: str,
    request: RowIndexSchema,
    registry: EditorRegistry = Depends(get_editor_registry),
):
    editor_session = _editor_session(quote_id, registry)
    if request.index is not None:
        editor_session.editor.select(request.index)
    return _state(editor_session)


@router.post("/lines/toggle-edit", response_model=QuoteLinesStateDTO, responses=_SESSION_NOT_FOUND)
async def toggle_edit(
    quote_id: str,
    request: RowIndexSchema,
    registry: EditorRegistry = Depends(get_editor_registry),
):
    editor_session = _editor_session(quote_id, registry)
    editor_session.editor.toggle_edit(request.index)
    return _state(editor_session)


@router.post("/lines/cancel", response_model=QuoteLinesStateDTO, responses=_SESSION_NOT_FOUND)
async def cancel_edit(
    quote_id: str,
    request: RowIndexSchema,
    registry: EditorRegistry = Depends(get_editor_registry),
):
    editor_session = _editor_session(quote_id, registry)
    editor_session.editor.cancel(request.index)
    return _state(editor_session)


@router.post("/lines/insert", response_model=QuoteLinesStateDTO, responses=_SESSION_NOT_FOUND)
async def insert_line(
    quote_id: str,
    request: InsertRowSchema,
    registry: EditorRegistry = Depends(get_editor_registry),
):
    """
    Insert a blank row after the given (or selected) row.

    The new row never lands after the overall discount row nor between a
    product and its attached discount.
    """
    editor_session = _editor_session(quote_id, registry)
    editor_session.editor.insert(request.after_index)
    return _state(editor_session)


@router.post("/lines/remove", response_model=QuoteLinesStateDTO, responses=_SESSION_NOT_FOUND)
async def remove_line(
    quote_id: str,
    request: RowIndexSchema,
    registry: EditorRegistry = Depends(get_editor_registry),
):
    """
    Remove the given (or selected) row.

    Persisted rows are deleted on the next successful save.
    """
    editor_session = _editor_session(quote_id, registry)
    editor_session.editor.remove(request.index)
    return _state(editor_session)


@router.patch(
    "/lines/{local_id}",
    response_model=QuoteLinesStateDTO,
    responses=_SESSION_NOT_FOUND,
)
async def update_line_field(
    quote_id: str,
    local_id: int,
    request: UpdateFieldSchema,
    registry: EditorRegistry = Depends(get_editor_registry),
):
    """
    Change one field of a row and recompute its derived values.

    **Request body:**
    - `field` (required): Field name, e.g. `length`, `wastage`, `units`
    - `value` (optional): Raw value; empty clears the field

    **Example request:**
    ```json
    {
      "field": "wastage",
      "value": "10"
    }
    ```

    **Returns:**
    - 200: Editor state (a row outside edit mode yields a warning notification)
    - 404: Unknown quote session or row
    """
    editor_session = _editor_session(quote_id, registry)
    try:
        editor_session.editor.update_field(local_id, request.field, request.value)
    except KeyError:
        raise _row_not_found(quote_id, local_id)
    return _state(editor_session)


@router.put("/discount", response_model=QuoteLinesStateDTO, responses=_SESSION_NOT_FOUND)
async def set_overall_discount(
    quote_id: str,
    request: OverallDiscountSchema,
    registry: EditorRegistry = Depends(get_editor_registry),
):
    """
    Set the overall discount rate.

    An empty or zero rate removes the overall discount row.
    """
    editor_session = _editor_session(quote_id, registry)
    editor_session.editor.set_overall_discount(request.rate)
    return _state(editor_session)


@router.post(
    "/lines/{local_id}/search",
    response_model=QuoteLinesStateDTO,
    responses=_SESSION_NOT_FOUND,
)
async def search_products(
    quote_id: str,
    local_id: int,
    request: SearchSchema,
    registry: EditorRegistry = Depends(get_editor_registry),
):
    """
    Update the product search text of a row.

    The catalog query runs after the debounce delay; fetch the results with
    `GET .../candidates`.
    """
    editor_session = _editor_session(quote_id, registry)
    try:
        editor_session.editor.change_query(local_id, request.term)
    except KeyError:
        raise _row_not_found(quote_id, local_id)
    return _state(editor_session)


@router.put(
    "/lines/{local_id}/suggestions",
    response_model=QuoteLinesStateDTO,
    responses=_SESSION_NOT_FOUND,
)
async def set_suggestions_visible(
    quote_id: str,
    local_id: int,
    request: SuggestionsSchema,
    registry: EditorRegistry = Depends(get_editor_registry),
):
    editor_session = _editor_session(quote_id, registry)
    editor_session.editor.set_suggestions_visible(local_id, request.visible)
    return _state(editor_session)


@router.get(
    "/candidates",
    response_model=List[CatalogProduct],
    responses=_SESSION_NOT_FOUND,
)
async def get_candidates(
    quote_id: str,
    registry: EditorRegistry = Depends(get_editor_registry),
):
    """Products returned by the latest completed catalog search"""
    return _editor_session(quote_id, registry).editor.catalog.candidates


@router.post("/lines/select-product", response_model=QuoteLinesStateDTO, responses=_SESSION_NOT_FOUND)
async def select_product(
    quote_id: str,
    request: SelectProductSchema,
    registry: EditorRegistry = Depends(get_editor_registry),
):
    """
    Apply a catalog product to a row.

    Selecting a discount product (e.g. "10% Discount") attaches it to the
    product row directly above once the resync delay has passed.
    """
    editor_session = _editor_session(quote_id, registry)
    await editor_session.editor.select_product(request.index, request.product_id)
    return _state(editor_session)


@router.post("/save", response_model=QuoteLinesStateDTO, responses=_SESSION_NOT_FOUND)
async def save_lines(
    quote_id: str,
    registry: EditorRegistry = Depends(get_editor_registry),
    session: AsyncSession = Depends(get_session),
):
    """
    Persist every row, apply pending deletions and store the overall discount.

    **Returns:**
    - 200: Editor state; rows carry their persisted ids after a successful
      save, a failed save is reported as an error notification
    - 404: Unknown quote session
    """
    editor_session = _editor_session(quote_id, registry)
    use_case = SaveQuoteLineItems(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyQuoteLineItemRepository(session),
        SqlAlchemyQuoteRepository(session),
    )
    await editor_session.editor.save(use_case)
    return _state(editor_session)
