from unittest.mock import MagicMock, patch

from utiltrack.cli.settings_menu import _format_number_input
from utiltrack.models.property import Property
from utiltrack.models.tariff import CustomFieldConfig, FieldType, StandardReadings, TariffConfiguration
from utiltrack.services.tariff_service import TariffService

PROP = Property(id=1, owner_id=1, name="Home")


def _service(config: TariffConfiguration | None = None) -> TariffService:
    repo = MagicMock()
    repo.get.return_value = config or TariffConfiguration(property_id=1)
    repo.put.side_effect = lambda c: c
    return TariffService(repo)


def _saved(service: TariffService) -> TariffConfiguration:
    return service.repo.put.call_args.args[0]


class TestFormatNumberInput:
    def test_whole(self):
        assert _format_number_input(4.0) == "4"

    def test_fraction(self):
        assert _format_number_input(4.32) == "4.32"


class TestSettingsMenu:
    @patch("utiltrack.cli.settings_menu.questionary")
    def test_back(self, mock_q):
        from utiltrack.cli.settings_menu import settings_menu

        service = _service()
        mock_q.select.return_value.ask.return_value = "Back"

        settings_menu(PROP, service)
        service.repo.put.assert_not_called()

    @patch("utiltrack.cli.settings_menu.questionary")
    def test_edit_rates(self, mock_q):
        from utiltrack.cli.settings_menu import settings_menu

        service = _service()
        mock_q.select.return_value.ask.side_effect = ["Edit Rates & Fees", "Back"]
        mock_q.text.return_value.ask.side_effect = ["4,32", "20.47", "7.95", "5.38", "289,04"]

        settings_menu(PROP, service)

        saved = _saved(service)
        assert saved.electricity_rate == 4.32
        assert saved.gas_fixed_fee == 289.04

    @patch("utiltrack.cli.settings_menu.questionary")
    def test_edit_rates_retries_invalid_number(self, mock_q):
        from utiltrack.cli.settings_menu import settings_menu

        service = _service()
        mock_q.select.return_value.ask.side_effect = ["Edit Rates & Fees", "Back"]
        mock_q.text.return_value.ask.side_effect = ["abc", "-1", "4.32", "0", "0", "0", "0"]

        settings_menu(PROP, service)

        assert _saved(service).electricity_rate == 4.32

    @patch("utiltrack.cli.settings_menu.questionary")
    def test_edit_rates_cancelled(self, mock_q):
        from utiltrack.cli.settings_menu import settings_menu

        service = _service()
        mock_q.select.return_value.ask.side_effect = ["Edit Rates & Fees", "Back"]
        mock_q.text.return_value.ask.side_effect = ["4.32", None]

        settings_menu(PROP, service)
        service.repo.put.assert_not_called()

    @patch("utiltrack.cli.settings_menu.questionary")
    def test_edit_readings(self, mock_q):
        from utiltrack.cli.settings_menu import settings_menu

        config = TariffConfiguration(
            property_id=1,
            custom_fields=[CustomFieldConfig(id="heat", name="Heating", type=FieldType.RATE, unit="Gcal")],
        )
        service = _service(config)
        mock_q.select.return_value.ask.side_effect = ["Edit Last Readings", "Back"]
        mock_q.text.return_value.ask.side_effect = ["18329", "1224", "12994", "40"]

        settings_menu(PROP, service)

        saved = _saved(service)
        assert saved.last_readings == StandardReadings(electricity=18329, water=1224, gas=12994)
        assert saved.custom_last_readings == {"heat": 40}

    @patch("utiltrack.cli.settings_menu.questionary")
    def test_add_metered_field(self, mock_q):
        from utiltrack.cli.settings_menu import settings_menu

        service = _service()
        mock_q.select.return_value.ask.side_effect = ["Add Custom Field", "Metered (rate)", "Back"]
        mock_q.text.return_value.ask.side_effect = ["Heating", "Gcal", "1500", "40"]

        settings_menu(PROP, service)

        saved = _saved(service)
        field = saved.custom_fields[0]
        assert field.name == "Heating"
        assert field.type == FieldType.RATE
        assert field.price == 1500
        assert saved.custom_last_readings == {field.id: 40}

    @patch("utiltrack.cli.settings_menu.questionary")
    def test_add_metered_field_without_unit(self, mock_q):
        from utiltrack.cli.settings_menu import settings_menu

        service = _service()
        mock_q.select.return_value.ask.side_effect = ["Add Custom Field", "Metered (rate)", "Back"]
        mock_q.text.return_value.ask.side_effect = ["Heating", ""]

        settings_menu(PROP, service)
        service.repo.put.assert_not_called()

    @patch("utiltrack.cli.settings_menu.questionary")
    def test_add_field_with_blank_name(self, mock_q):
        from utiltrack.cli.settings_menu import settings_menu

        service = _service()
        mock_q.select.return_value.ask.side_effect = ["Add Custom Field", "Back"]
        mock_q.text.return_value.ask.side_effect = ["   "]

        settings_menu(PROP, service)
        service.repo.put.assert_not_called()

    @patch("utiltrack.cli.settings_menu.questionary")
    def test_add_field_rejected_by_service(self, mock_q):
        from utiltrack.cli.settings_menu import settings_menu

        service = _service()
        service.add_custom_field = MagicMock(side_effect=ValueError("Custom field name is required"))
        mock_q.select.return_value.ask.side_effect = ["Add Custom Field", "Fixed fee", "Back"]
        mock_q.text.return_value.ask.side_effect = ["Internet", "350"]

        settings_menu(PROP, service)

        service.add_custom_field.assert_called_once()
        service.repo.put.assert_not_called()

    @patch("utiltrack.cli.settings_menu.questionary")
    def test_add_fee_field(self, mock_q):
        from utiltrack.cli.settings_menu import settings_menu

        service = _service()
        mock_q.select.return_value.ask.side_effect = ["Add Custom Field", "Fixed fee", "Back"]
        mock_q.text.return_value.ask.side_effect = ["Internet", "0"]

        settings_menu(PROP, service)

        field = _saved(service).custom_fields[0]
        assert field.type == FieldType.FEE
        assert field.is_variable_fee

    @patch("utiltrack.cli.settings_menu.questionary")
    def test_edit_field_price(self, mock_q):
        from utiltrack.cli.settings_menu import settings_menu

        config = TariffConfiguration(
            property_id=1,
            custom_fields=[CustomFieldConfig(id="p", name="Parking", type=FieldType.FEE, price=200)],
        )
        service = _service(config)
        mock_q.select.return_value.ask.side_effect = ["Edit Custom Field Price", "Parking (Fixed fee)", "Back"]
        mock_q.text.return_value.ask.return_value = "250"

        settings_menu(PROP, service)

        assert _saved(service).get_field("p").price == 250

    @patch("utiltrack.cli.settings_menu.questionary")
    def test_delete_field(self, mock_q):
        from utiltrack.cli.settings_menu import settings_menu

        config = TariffConfiguration(
            property_id=1,
            custom_fields=[CustomFieldConfig(id="heat", name="Heating", type=FieldType.RATE, unit="Gcal")],
            custom_last_readings={"heat": 5},
        )
        service = _service(config)
        mock_q.select.return_value.ask.side_effect = ["Delete Custom Field", "Heating (Metered)", "Back"]
        mock_q.confirm.return_value.ask.return_value = True

        settings_menu(PROP, service)

        saved = _saved(service)
        assert saved.custom_fields == []
        assert saved.custom_last_readings == {}

    @patch("utiltrack.cli.settings_menu.questionary")
    def test_delete_with_no_fields(self, mock_q):
        from utiltrack.cli.settings_menu import settings_menu

        service = _service()
        mock_q.select.return_value.ask.side_effect = ["Delete Custom Field", "Back"]

        settings_menu(PROP, service)
        mock_q.confirm.assert_not_called()
