import json
import logging
from datetime import datetime

import pytest

from household_ledger.ids import CounterIdProvider
from household_ledger.ledger import add_asset, add_transaction, reset_ledger
from household_ledger.models import AssetCategory, LoanDetails, TransactionDraft, TransactionType
from household_ledger.storage import (
    BackupFormatError,
    export_backup,
    load_ledger,
    restore_backup,
    save_ledger,
)


def _state():
    provider = CounterIdProvider('s')
    state = reset_ledger()
    state, _ = add_asset(
        state, '주담대', AssetCategory.LOAN, 150_000_000, 'bg-red-400',
        LoanDetails('4.2', 360, 6), id_provider=provider,
    )
    state, _ = add_transaction(state, TransactionDraft(
        TransactionType.EXPENSE, 0, '식비', '2024-03-05', budget_amount=50000,
    ), id_provider=provider)
    state, _ = add_transaction(state, TransactionDraft(
        TransactionType.EXPENSE, 12500.5, '쇼핑', '2024-03-06', description='충동구매', is_impulse=True,
    ), id_provider=provider)
    return state


def test_store_roundtrip(tmp_path):
    target = tmp_path / 'nested' / 'ledger.json'
    state = _state()

    save_ledger(state, target)
    loaded = load_ledger(target)

    assert loaded == state
    raw = json.loads(target.read_text(encoding='utf-8'))
    assert set(raw) == {'assets', 'transactions'}
    assert '식비' in target.read_text(encoding='utf-8')


def test_missing_store_yields_default_ledger(tmp_path):
    assert load_ledger(tmp_path / 'absent.json') == reset_ledger()


def test_corrupt_store_is_logged_and_replaced(tmp_path, caplog):
    target = tmp_path / 'ledger.json'
    target.write_text('{not json', encoding='utf-8')

    with caplog.at_level(logging.WARNING, logger='household_ledger'):
        state = load_ledger(target)

    assert state == reset_ledger()
    assert 'Ignoring unreadable ledger store' in caplog.text


def test_export_backup_writes_dated_file(tmp_path):
    state = _state()

    path = export_backup(state, tmp_path, exported_at=datetime(2024, 3, 7, 21, 30))

    assert path.name == 'lovely-ledger-backup-2024-03-07.json'
    payload = json.loads(path.read_text(encoding='utf-8'))
    assert payload['version'] == '1.0'
    assert payload['exportedAt'] == '2024-03-07T21:30:00'
    assert len(payload['assets']) == 2
    assert len(payload['transactions']) == 2
    assert restore_backup(path) == state


def test_restore_normalizes_legacy_backups(tmp_path):
    target = tmp_path / 'old.json'
    target.write_text(json.dumps({
        'assets': [{'id': '1', 'name': '현금', 'category': 'cash', 'balance': '10,000'}],
        'transactions': [{
            'id': 'x', 'type': 'expense', 'amount': 5000, 'category': '기타',
            'date': '2023-12-31T15:00:00.000Z', 'allocationType': 'INVEST_AGGRESSIVE',
        }],
    }), encoding='utf-8')

    state = restore_backup(target)

    assert state.assets[0].balance == 10000
    assert state.transactions[0].date == '2023-12-31'
    assert state.transactions[0].allocation_type.value == 'INVEST_RISK'


@pytest.mark.parametrize('content', [
    '{"assets": []}',
    '{"transactions": [], "assets": {}}',
    '[]',
    'not json at all',
    '{"assets": [], "transactions": [{"id": "a", "type": "TRANSFER", "amount": 1, "date": "2024-01-01"}]}',
    '{"assets": [{"name": "no id", "category": "CASH"}], "transactions": []}',
])
def test_restore_rejects_malformed_backups(tmp_path, content):
    target = tmp_path / 'bad.json'
    target.write_text(content, encoding='utf-8')

    with pytest.raises(BackupFormatError):
        restore_backup(target)


@pytest.mark.parametrize('raw', [
    b'\xff\xfe{}',
    b'{"assets": [], "transactions": ["\xff\xfe"]}',
])
def test_non_utf8_files_are_treated_as_corrupt(tmp_path, caplog, raw):
    target = tmp_path / 'ledger.json'
    target.write_bytes(raw)

    with pytest.raises(BackupFormatError):
        restore_backup(target)
    with caplog.at_level(logging.WARNING, logger='household_ledger'):
        assert load_ledger(target) == reset_ledger()
    assert 'Ignoring unreadable ledger store' in caplog.text


def test_restore_rejects_unparseable_loan_rate(tmp_path):
    target = tmp_path / 'rate.json'
    target.write_text(json.dumps({
        'assets': [{
            'id': '3', 'name': '대출', 'category': 'LOAN', 'balance': 1000,
            'loanDetails': {'interestRate': '4.5%', 'durationMonths': 12},
        }],
        'transactions': [],
    }), encoding='utf-8')

    with pytest.raises(BackupFormatError):
        restore_backup(target)
