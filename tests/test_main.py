import json
import sys
from datetime import date
from decimal import Decimal

import pytest

from interest_tax_report import main as main_module
from interest_tax_report.exceptions import ConfigurationError


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / 'config.json'
    path.write_text(json.dumps({
        'broker': 'Interactive Brokers',
        'tax_country': 'ru',
        'currency_rates': {
            '2022-12-30': {'USD': '70.3375'},
            '2023-06-01': {'USD': '90.0'},
            '2023-07-03': {'USD': '90.1'},
        },
    }), encoding='utf-8')
    return str(path)


@pytest.fixture
def payments_path(tmp_path):
    path = tmp_path / 'interest.csv'
    path.write_text(
        'date;amount;currency\n'
        '2022-12-30;3,20;USD\n'
        '2023-06-01;100;USD\n'
        '2023-07-03;10,005;USD\n',
        encoding='utf-8')
    return str(path)


def test_load_config(config_path):
    config = main_module.load_config(config_path)
    assert config.broker.name == 'Interactive Brokers'
    assert config.currency_rates[date(2023, 6, 1)] == {'USD': Decimal('90.0')}


@pytest.mark.parametrize('content', ['{not json', '[1, 2]'])
def test_load_config_rejects_invalid_files(tmp_path, content):
    path = tmp_path / 'config.json'
    path.write_text(content, encoding='utf-8')

    with pytest.raises(ConfigurationError):
        main_module.load_config(str(path))


def test_create_converter_uses_configured_rates(config_path):
    converter = main_module.create_converter(main_module.load_config(config_path))
    assert converter.precise_currency_rate(date(2023, 7, 3), 'USD', 'RUB') == Decimal('90.1')


def test_run_for_year_prints_report_and_tax_statement(config_path, payments_path, tmp_path, capsys):
    excel_path = tmp_path / 'report.xlsx'

    main_module.run(config_path, payments_path, 2023, str(excel_path))

    out = capsys.readouterr().out
    assert 'received through Interactive Brokers' in out
    assert 'TAX STATEMENT 2023' in out
    assert '30.12.2022' not in out
    assert '9901.45 RUB' in out
    assert excel_path.exists()


def test_run_without_income(config_path, payments_path, capsys):
    main_module.run(config_path, payments_path, 2021)
    assert capsys.readouterr().out == "\nNo interest income to report.\n"


def test_main_reports_errors(config_path, payments_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, 'argv', ['interest-tax-report', config_path, payments_path, 'last'])

    with pytest.raises(SystemExit) as error:
        main_module.main()

    assert error.value.code == 1
    assert 'Error: Invalid tax year: last' in capsys.readouterr().out


def test_main_usage(monkeypatch, capsys):
    monkeypatch.setattr(sys, 'argv', ['interest-tax-report'])

    with pytest.raises(SystemExit) as error:
        main_module.main()

    assert error.value.code == 1
    assert capsys.readouterr().out.startswith('Usage:')


def test_main_missing_file(config_path, tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, 'argv', ['interest-tax-report', config_path, str(tmp_path / 'missing.csv')])

    with pytest.raises(SystemExit):
        main_module.main()

    assert 'File not found' in capsys.readouterr().out


def test_main_aborts_on_missing_rate(config_path, tmp_path, monkeypatch, capsys):
    payments_path = tmp_path / 'interest.csv'
    payments_path.write_text('date;amount;currency\n2023-06-01;100;USD\n2023-08-01;1;USD\n', encoding='utf-8')
    monkeypatch.setattr(sys, 'argv', ['interest-tax-report', config_path, str(payments_path), '2023'])

    with pytest.raises(SystemExit) as error:
        main_module.main()

    out = capsys.readouterr().out
    assert error.value.code == 1
    assert 'Error: Unable to get USD/RUB rate for 2023-08-01' in out
    assert 'TAX STATEMENT' not in out


def test_main_reports_short_csv_rows(config_path, tmp_path, monkeypatch, capsys):
    payments_path = tmp_path / 'interest.csv'
    payments_path.write_text('date;amount;currency\n2023-06-01;100\n', encoding='utf-8')
    monkeypatch.setattr(sys, 'argv', ['interest-tax-report', config_path, str(payments_path), '2023'])

    with pytest.raises(SystemExit) as error:
        main_module.main()

    assert error.value.code == 1
    assert 'Error: Missing currency in interest payment row' in capsys.readouterr().out
