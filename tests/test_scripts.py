from datetime import datetime

from household_ledger.ids import CounterIdProvider
from household_ledger.ledger import add_asset, add_transaction, reset_ledger
from household_ledger.models import AllocationType, AssetCategory, TransactionDraft, TransactionType
from household_ledger.storage import export_backup
from scripts.budget_report import build_report
from scripts.validate_backup import main as validate_main, validate_backup


def _state():
    provider = CounterIdProvider('s')
    state = reset_ledger()
    state, _ = add_asset(state, '적금', AssetCategory.FINANCE, 3_000_000, id_provider=provider)
    state, _ = add_asset(state, '대출', AssetCategory.LOAN, 1_000_000, id_provider=provider)
    drafts = [
        TransactionDraft(TransactionType.EXPENSE, 0, '식비', '2024-03-01', budget_amount=50000),
        TransactionDraft(TransactionType.EXPENSE, 30000, '식비', '2024-03-02'),
        TransactionDraft(TransactionType.EXPENSE, 10000, '쇼핑', '2024-03-12', is_impulse=True),
        TransactionDraft(TransactionType.EXPENSE, 0, '경조사', '2024-03-16', budget_amount=200000,
                         allocation_type=AllocationType.EVENT),
    ]
    for draft in drafts:
        state, _ = add_transaction(state, draft, id_provider=provider)
    return state


def test_budget_report_lines():
    lines = build_report(_state(), 2024, 3)

    assert lines[0] == '=== Budget report 2024-03 ==='
    assert any(line.startswith('Living: budget 50,000원 | spent 40,000원') for line in lines)
    assert any(line.startswith('Event: budget 200,000원') for line in lines)
    assert sum(line.startswith('  Week ') for line in lines) == 6
    assert any(line.startswith('Impulse spending: 10,000원') for line in lines)
    assert '  - 쇼핑: 10,000원' in lines
    assert lines[-1] == 'Net worth: 2,000,000원 (200만원)'


def test_budget_report_on_an_empty_ledger():
    lines = build_report(reset_ledger(), 2024, 2)

    assert any('calm' in line for line in lines)
    assert lines[-1] == 'Net worth: 0원'


def test_validate_backup(tmp_path, capsys):
    export_backup(_state(), tmp_path, exported_at=datetime(2024, 3, 31))

    assert validate_main([str(tmp_path)]) == 0
    assert 'validated successfully' in capsys.readouterr().out

    broken = tmp_path / 'broken.json'
    broken.write_text('{"assets": []}', encoding='utf-8')
    assert validate_backup(broken)['errors'].startswith("missing 'version'")
    assert validate_main([str(tmp_path)]) == 1
    assert 'broken.json' in capsys.readouterr().out


def test_validate_backup_missing_directory(tmp_path):
    assert validate_main([str(tmp_path / 'nowhere')]) == 1


def test_validate_backup_reports_non_utf8_files(tmp_path):
    garbled = tmp_path / 'garbled.json'
    garbled.write_bytes(b'\xff\xfe{}')

    assert validate_backup(garbled)['errors'].startswith('not UTF-8')
    assert validate_main([str(tmp_path)]) == 1
