import json

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from changelog_api.api.v1.statuses import (
    get_columns,
    reorder_statuses,
    create_status,
    get_status,
    rename_status,
    move_status,
    delete_status,
)
from changelog_api.api.v1.status_mappings import (
    get_manifest,
    update_status_mapping,
    delete_status_mapping,
)
from changelog_api.core.exceptions import (
    CategoryCapacityError,
    ConflictError,
    LastStatusError,
    NotFoundError,
    ReservedStatusError,
    UnknownCategoryError,
    ValidationError,
)
from changelog_api.main import workflow_error_handler
from changelog_api.models.status import StatusDefinition
from changelog_api.schemas.status import (
    MovePosition,
    StatusCreate,
    StatusMove,
    StatusOrderUpdate,
    StatusUpdate,
)
from changelog_api.schemas.status_mapping import StatusMappingUpdate


@pytest.fixture
def mock_db():
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def mock_status():
    found = MagicMock(spec=StatusDefinition)
    found.id = 1
    found.display_name = "Proposed"
    return found


class TestStatusEndpoints:
    """Tests for the /statuses router"""

    @pytest.mark.asyncio
    async def test_get_columns(self, mock_db, manifest, mock_status):
        columns = [{"status": mock_status, "label": "Proposed", "count": 3,
                    "category_id": None, "category_label": None}]
        with patch('changelog_api.api.v1.statuses.StatusService.list_columns',
                   new_callable=AsyncMock, return_value=columns) as mock_list:
            result = await get_columns(db=mock_db, manifest=manifest)

            assert result == {"columns": columns}
            mock_list.assert_called_once_with(db=mock_db, manifest=manifest)

    @pytest.mark.asyncio
    async def test_create_status(self, mock_db, manifest, mock_status):
        with patch('changelog_api.api.v1.statuses.StatusService.create',
                   new_callable=AsyncMock, return_value=mock_status) as mock_create:
            result = await create_status(
                StatusCreate(display_name="Proposed", category_id="proposed"),
                db=mock_db,
                manifest=manifest,
            )

            assert result == mock_status
            mock_create.assert_called_once_with(
                db=mock_db,
                display_name="Proposed",
                category_id="proposed",
                manifest=manifest,
            )

    @pytest.mark.asyncio
    async def test_create_status_conflict_propagates(self, mock_db):
        with patch('changelog_api.api.v1.statuses.StatusService.create',
                   new_callable=AsyncMock, side_effect=ConflictError("Status 'Proposed' already exists")):
            with pytest.raises(ConflictError):
                await create_status(StatusCreate(display_name="Proposed"), db=mock_db, manifest=None)

    @pytest.mark.asyncio
    async def test_get_status(self, mock_db, mock_status):
        with patch('changelog_api.api.v1.statuses.StatusService.get_by_id',
                   new_callable=AsyncMock, return_value=mock_status):
            assert await get_status(1, db=mock_db) == mock_status

    @pytest.mark.asyncio
    async def test_get_status_not_found(self, mock_db):
        with patch('changelog_api.api.v1.statuses.StatusService.get_by_id',
                   new_callable=AsyncMock, return_value=None):
            with pytest.raises(HTTPException) as exc_info:
                await get_status(999, db=mock_db)

            assert exc_info.value.status_code == status.HTTP_404_NOT_FOUND
            assert "Status not found" in str(exc_info.value.detail)

    @pytest.mark.asyncio
    async def test_rename_status(self, mock_db, mock_status):
        with patch('changelog_api.api.v1.statuses.StatusService.rename',
                   new_callable=AsyncMock, return_value=mock_status) as mock_rename:
            await rename_status(1, StatusUpdate(display_name="Ideas"), db=mock_db)

            mock_rename.assert_called_once_with(db=mock_db, status_id=1, display_name="Ideas")

    @pytest.mark.asyncio
    async def test_move_status(self, mock_db, mock_status):
        with patch('changelog_api.api.v1.statuses.StatusService.reorder',
                   new_callable=AsyncMock, return_value=[mock_status]) as mock_reorder:
            result = await move_status(
                1,
                StatusMove(target_status_id=2, position="after"),
                db=mock_db,
            )

            assert result == {"statuses": [mock_status]}
            mock_reorder.assert_called_once_with(
                db=mock_db,
                status_id=1,
                target_status_id=2,
                position=MovePosition.AFTER,
            )

    @pytest.mark.asyncio
    async def test_reorder_statuses(self, mock_db, mock_status):
        with patch('changelog_api.api.v1.statuses.StatusService.reorder_all',
                   new_callable=AsyncMock, return_value=[mock_status]) as mock_reorder_all:
            result = await reorder_statuses(StatusOrderUpdate(status_order=[1]), db=mock_db)

            assert result == {"statuses": [mock_status]}
            mock_reorder_all.assert_called_once_with(db=mock_db, status_order=[1])

    @pytest.mark.asyncio
    async def test_delete_status(self, mock_db):
        with patch('changelog_api.api.v1.statuses.StatusService.delete',
                   new_callable=AsyncMock) as mock_delete:
            result = await delete_status(3, reassign_to=2, db=mock_db)

            assert result is None
            mock_delete.assert_called_once_with(db=mock_db, status_id=3, reassign_to_id=2)

    @pytest.mark.asyncio
    async def test_delete_status_log_mentions_reassignment_only_when_given(self, mock_db):
        with patch('changelog_api.api.v1.statuses.StatusService.delete', new_callable=AsyncMock), \
             patch('changelog_api.api.v1.statuses.api_logger') as mock_logger:
            await delete_status(3, reassign_to=None, db=mock_db)
            mock_logger.info.assert_called_once_with("Status 3 deleted")

            mock_logger.reset_mock()
            await delete_status(3, reassign_to=2, db=mock_db)
            mock_logger.info.assert_called_once_with("Status 3 deleted, events reassigned to 2")


class TestMappingEndpoints:

    @pytest.mark.asyncio
    async def test_manifest_without_theme(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_manifest(manifest=None)

        assert exc_info.value.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_manifest(self, manifest):
        assert await get_manifest(manifest=manifest) == {"success": True, "manifest": manifest}

    @pytest.mark.asyncio
    async def test_update_mapping(self, mock_db, manifest):
        mapping = MagicMock()
        with patch('changelog_api.api.v1.status_mappings.StatusMappingService.set_mapping',
                   new_callable=AsyncMock, return_value=mapping) as mock_set:
            result = await update_status_mapping(
                1,
                StatusMappingUpdate(category_id="released"),
                db=mock_db,
                manifest=manifest,
            )

            assert result == {"success": True, "mapping": mapping}
            mock_set.assert_called_once_with(db=mock_db, status_id=1, category_id="released", manifest=manifest)

    @pytest.mark.asyncio
    async def test_delete_mapping(self, mock_db, manifest):
        with patch('changelog_api.api.v1.status_mappings.StatusMappingService.set_mapping',
                   new_callable=AsyncMock, return_value=None) as mock_set:
            result = await delete_status_mapping(1, db=mock_db, manifest=manifest)

            assert result == {"success": True, "mapping": None}
            mock_set.assert_called_once_with(db=mock_db, status_id=1, category_id=None, manifest=manifest)


class TestWorkflowErrorHandler:

    @pytest.fixture
    def mock_request(self):
        request = MagicMock()
        request.method = "DELETE"
        request.url.path = "/api/v1/statuses/1"
        return request

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error, expected_status", [
        (ValidationError("bad"), status.HTTP_400_BAD_REQUEST),
        (ConflictError("bad"), status.HTTP_409_CONFLICT),
        (NotFoundError("bad"), status.HTTP_404_NOT_FOUND),
        (ReservedStatusError("bad"), status.HTTP_403_FORBIDDEN),
        (LastStatusError("bad"), status.HTTP_409_CONFLICT),
        (UnknownCategoryError("bad"), status.HTTP_400_BAD_REQUEST),
        (CategoryCapacityError("bad"), status.HTTP_409_CONFLICT),
    ])
    async def test_error_maps_to_status_code(self, mock_request, error, expected_status):
        response = await workflow_error_handler(mock_request, error)

        assert response.status_code == expected_status
        assert json.loads(response.body) == {"detail": "bad"}

    def test_conflict_is_a_validation_error(self):
        assert isinstance(ConflictError("x"), ValidationError)
