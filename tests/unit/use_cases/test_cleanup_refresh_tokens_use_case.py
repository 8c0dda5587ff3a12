import pytest

from src.app.use_cases.auth import CleanupRefreshTokensUseCase


@pytest.mark.asyncio
async def test_cleanup_reports_deleted_count(mock_uow, mock_logger):
    mock_uow.refresh_tokens.delete_expired.return_value = 4

    response = await CleanupRefreshTokensUseCase(mock_uow, mock_logger).execute()

    assert response.deleted_count == 4
    mock_uow.commit.assert_awaited_once()
    mock_logger.info.assert_called_once()
    assert mock_logger.info.call_args.args[1]["deleted_count"] == 4


@pytest.mark.asyncio
async def test_cleanup_failure_is_raised(mock_uow, mock_logger):
    mock_uow.refresh_tokens.delete_expired.side_effect = RuntimeError("database locked")

    with pytest.raises(RuntimeError):
        await CleanupRefreshTokensUseCase(mock_uow, mock_logger).execute()

    mock_uow.commit.assert_not_awaited()
    mock_logger.error.assert_called_once()
