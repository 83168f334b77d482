"""
Tests for the Salary Engine.

Covers:
- Input coercion
- Validation rules and message accumulation
- Proration by attendance
- PF wage ceiling and ESI threshold
- Flat payroll income tax inside the pipeline
- Total / net assembly and rounding order
"""

import logging
from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from payroll_engines.salary import (
    ESI_GROSS_THRESHOLD,
    PF_WAGE_CEILING,
    SalaryCalculationInput,
    SalaryCalculator,
    calculate_esi,
    calculate_provident_fund,
    calculate_salary,
    prorate_earnings,
    validate_salary_input,
)


def _input(**overrides) -> SalaryCalculationInput:
    values = {
        "basic_salary": Decimal("20000"),
        "hra": Decimal("8000"),
        "transport_allowance": Decimal("1600"),
        "medical_allowance": Decimal("1250"),
        "working_days": 22,
        "present_days": 22,
    }
    values.update(overrides)
    return SalaryCalculationInput(**values)


class TestSalaryCalculationInput:
    """Tests for the input value object."""

    def test_defaults(self):
        salary_input = SalaryCalculationInput(basic_salary=1000, working_days=22, present_days=22)

        assert salary_input.pf_rate == Decimal("0.12")
        assert salary_input.esi_rate == Decimal("0.0075")
        assert salary_input.professional_tax == Decimal("200")
        assert salary_input.income_tax_rate == Decimal("0.10")
        assert salary_input.overtime_rate == Decimal("0")
        assert salary_input.loan_deduction == Decimal("0")

    def test_numbers_coerced_to_decimal(self):
        salary_input = SalaryCalculationInput(
            basic_salary="15000.50", working_days=22, present_days=20, pf_rate=0.1,
        )

        assert salary_input.basic_salary == Decimal("15000.50")
        assert salary_input.working_days == Decimal("22")
        assert salary_input.pf_rate == Decimal("0.1")
        assert isinstance(salary_input.present_days, Decimal)

    def test_boolean_rejected(self):
        with pytest.raises(TypeError):
            SalaryCalculationInput(basic_salary=True, working_days=22, present_days=22)

    def test_is_immutable(self):
        salary_input = _input()
        with pytest.raises(FrozenInstanceError):
            salary_input.basic_salary = Decimal("1")


class TestValidation:
    """Tests for validate_salary_input."""

    def test_valid_input(self):
        result = validate_salary_input(_input())

        assert result.is_valid
        assert result.errors == ()

    def test_zero_present_days_is_valid(self):
        assert validate_salary_input(_input(present_days=0)).is_valid

    def test_present_equal_to_working_is_valid(self):
        assert validate_salary_input(_input(working_days=31, present_days=31)).is_valid

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"basic_salary": 0}, "Basic salary must be greater than 0"),
            ({"basic_salary": -100}, "Basic salary must be greater than 0"),
            ({"working_days": 32, "present_days": 20}, "Working days must be between 1 and 31"),
            ({"working_days": 0, "present_days": 0}, "Working days must be between 1 and 31"),
            ({"present_days": 23}, "Present days must be between 0 and working days"),
            ({"present_days": -1}, "Present days must be between 0 and working days"),
            ({"overtime_hours": -1}, "Overtime hours cannot be negative"),
            ({"overtime_rate": -500}, "Overtime rate cannot be negative"),
        ],
    )
    def test_single_rule_failure(self, overrides, message):
        result = validate_salary_input(_input(**overrides))

        assert not result.is_valid
        assert result.errors == (message,)

    def test_all_failures_accumulated_in_rule_order(self):
        result = validate_salary_input({
            "basic_salary": 0,
            "working_days": 40,
            "present_days": 50,
            "overtime_hours": -1,
            "overtime_rate": -5,
        })

        assert result.errors == (
            "Basic salary must be greater than 0",
            "Working days must be between 1 and 31",
            "Present days must be between 0 and working days",
            "Overtime hours cannot be negative",
            "Overtime rate cannot be negative",
        )

    def test_empty_mapping_reports_required_fields(self):
        result = validate_salary_input({})

        assert result.errors == (
            "Basic salary must be greater than 0",
            "Working days must be between 1 and 31",
            "Present days must be between 0 and working days",
        )

    def test_partial_mapping_without_overtime_is_valid(self):
        result = validate_salary_input({
            "basic_salary": "25000",
            "working_days": 22,
            "present_days": 21,
        })

        assert result.is_valid

    @pytest.mark.parametrize("bad_value", ["NaN", "Infinity", "-Infinity", float("nan"), "abc"])
    def test_non_finite_basic_rejected_once(self, bad_value):
        result = validate_salary_input({
            "basic_salary": bad_value,
            "working_days": 22,
            "present_days": 22,
        })

        assert result.errors == ("Basic salary must be a finite number",)

    def test_non_finite_optional_field_rejected(self):
        result = validate_salary_input({
            "basic_salary": 20000,
            "working_days": 22,
            "present_days": 22,
            "hra": "lots",
            "loan_deduction": Decimal("Infinity"),
        })

        assert result.errors == (
            "HRA must be a finite number",
            "Loan deduction must be a finite number",
        )

    def test_invalid_input_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="payroll_kernel"):
            validate_salary_input(_input(basic_salary=0))

        messages = [r.getMessage() for r in caplog.records]
        assert "salary_input_invalid" in messages

    def test_validation_never_raises(self):
        result = validate_salary_input({"basic_salary": object(), "working_days": None})

        assert not result.is_valid


class TestProration:
    """Tests for attendance proration."""

    def test_full_attendance_keeps_structure_values(self):
        prorated = prorate_earnings(_input(special_allowance=Decimal("750")))

        assert prorated.attendance_ratio == Decimal("1")
        assert prorated.basic == Decimal("20000")
        assert prorated.hra == Decimal("8000")
        assert prorated.transport_allowance == Decimal("1600")
        assert prorated.medical_allowance == Decimal("1250")
        assert prorated.special_allowance == Decimal("750")

    def test_half_attendance(self):
        prorated = prorate_earnings(_input(
            basic_salary=Decimal("22000"), hra=Decimal("11000"), present_days=11,
        ))

        assert prorated.attendance_ratio == Decimal("0.5")
        assert prorated.basic == Decimal("11000")
        assert prorated.hra == Decimal("5500")
        assert prorated.total == Decimal("11000") + Decimal("5500") + Decimal("800") + Decimal("625")

    def test_zero_attendance_zeroes_prorated_components(self):
        salary_input = _input(
            present_days=0,
            special_allowance=Decimal("500"),
            performance_bonus=Decimal("1000"),
            overtime_hours=Decimal("2"),
            overtime_rate=Decimal("500"),
            other_allowances=Decimal("300"),
        )
        prorated = prorate_earnings(salary_input)
        calculated = calculate_salary(salary_input)

        assert prorated.total == Decimal("0")
        assert calculated.overtime_amount == Decimal("1000")
        # bonus + overtime + other allowances only
        assert calculated.gross_earnings == Decimal("2300")
        assert calculated.pf_employee == Decimal("0")
        assert calculated.attendance_deduction == Decimal("28000")

    def test_bonus_and_overtime_not_prorated(self):
        full = calculate_salary(_input(
            performance_bonus=Decimal("3000"), overtime_hours=Decimal("10"), overtime_rate=Decimal("500"),
        ))
        half = calculate_salary(_input(
            present_days=11,
            performance_bonus=Decimal("3000"), overtime_hours=Decimal("10"), overtime_rate=Decimal("500"),
        ))

        assert full.overtime_amount == half.overtime_amount == Decimal("5000")
        assert full.gross_earnings - half.gross_earnings == Decimal("15425")

    def test_rounded_display_components(self):
        prorated = prorate_earnings(_input(present_days=20))

        assert prorated.rounded()["basic"] == Decimal("18182")
        assert prorated.rounded()["hra"] == Decimal("7273")


class TestProvidentFund:
    """Tests for the PF wage ceiling."""

    def test_basic_below_ceiling(self):
        assert calculate_provident_fund(Decimal("10000"), Decimal("0.12")) == (
            Decimal("1200"), Decimal("1200"),
        )

    def test_basic_above_ceiling_is_capped(self):
        employee, employer = calculate_provident_fund(Decimal("50000"), Decimal("0.12"))

        assert employee == Decimal("1800")
        assert employer == employee

    def test_ceiling_applies_to_prorated_basic(self):
        calculated = calculate_salary(_input(basic_salary=Decimal("50000"), pf_rate=Decimal("0.10")))

        assert calculated.pf_employee == (PF_WAGE_CEILING * Decimal("0.10"))
        assert calculated.pf_employer == calculated.pf_employee

    def test_prorated_basic_below_ceiling(self):
        # 30000 prorated by 11/22 = 15000, exactly the ceiling
        calculated = calculate_salary(_input(basic_salary=Decimal("30000"), present_days=11))

        assert calculated.pf_employee == Decimal("1800")


class TestEmployeeStateInsurance:
    """Tests for the ESI eligibility threshold."""

    def test_gross_at_threshold_pays_esi(self):
        calculated = calculate_salary(SalaryCalculationInput(
            basic_salary=ESI_GROSS_THRESHOLD, working_days=22, present_days=22,
        ))

        assert calculated.gross_earnings == Decimal("21000")
        assert calculated.esi_employee == Decimal("158")  # 157.5 rounds up
        assert calculated.esi_employer == Decimal("683")  # 682.5 rounds up

    def test_gross_above_threshold_pays_no_esi(self):
        calculated = calculate_salary(SalaryCalculationInput(
            basic_salary=Decimal("21001"), working_days=22, present_days=22,
        ))

        assert calculated.esi_employee == Decimal("0")
        assert calculated.esi_employer == Decimal("0")

    def test_threshold_compared_before_rounding(self):
        calculated = calculate_salary(SalaryCalculationInput(
            basic_salary=Decimal("21000"), other_allowances=Decimal("0.4"),
            working_days=22, present_days=22,
        ))

        assert calculated.gross_earnings == Decimal("21000")
        assert calculated.esi_employee == Decimal("0")

    def test_zero_rate_charges_no_employer_share(self):
        assert calculate_esi(Decimal("15000"), Decimal("0")) == (Decimal("0"), Decimal("0"))


class TestSalaryCalculator:
    """End-to-end pipeline tests."""

    def setup_method(self):
        self.calculator = SalaryCalculator()

    def test_scenario_above_esi_threshold(self):
        calculated = self.calculator.calculate(_input(pf_rate="0.12", esi_rate="0.0075"))

        assert calculated.pf_employee == Decimal("1800")
        assert calculated.gross_earnings == Decimal("30850")
        assert calculated.esi_employee == Decimal("0")
        assert calculated.esi_employer == Decimal("0")
        assert calculated.income_tax == Decimal("0")
        assert calculated.total_deductions == Decimal("2000")
        assert calculated.net_salary == Decimal("28850")
        assert calculated.attendance_deduction == Decimal("0")

    def test_scenario_below_esi_threshold(self):
        calculated = self.calculator.calculate(_input(
            basic_salary=Decimal("10000"),
            hra=Decimal("3000"),
            transport_allowance=Decimal("1000"),
            medical_allowance=Decimal("500"),
        ))

        assert calculated.gross_earnings == Decimal("14500")
        assert calculated.pf_employee == Decimal("1200")
        assert calculated.esi_employee == Decimal("109")
        assert calculated.esi_employer == Decimal("471")
        assert calculated.total_deductions == Decimal("1509")
        assert calculated.net_salary == Decimal("12991")

    def test_half_attendance(self):
        calculated = self.calculator.calculate(_input(
            basic_salary=Decimal("22000"), hra=Decimal("11000"),
            transport_allowance=0, medical_allowance=0, present_days=11,
        ))

        assert calculated.gross_earnings == Decimal("16500")
        assert calculated.pf_employee == Decimal("1320")
        assert calculated.esi_employee == Decimal("124")
        assert calculated.esi_employer == Decimal("536")
        assert calculated.attendance_deduction == Decimal("16500")
        assert calculated.net_salary == Decimal("14856")

    def test_half_attendance_prorates_transport_and_medical(self):
        calculated = self.calculator.calculate(_input(
            basic_salary=Decimal("22000"), hra=Decimal("11000"), present_days=11,
        ))

        # 11000 + 5500 + 800 + 625
        assert calculated.gross_earnings == Decimal("17925")
        assert calculated.pf_employee == Decimal("1320")
        assert calculated.esi_employee == Decimal("134")
        assert calculated.esi_employer == Decimal("583")
        assert calculated.net_salary == Decimal("16271")

    def test_attendance_deduction_not_in_total(self):
        calculated = self.calculator.calculate(_input(present_days=11))

        assert calculated.attendance_deduction == Decimal("14000")
        assert calculated.total_deductions == (
            calculated.pf_employee + calculated.esi_employee + Decimal("200") + calculated.income_tax
        )

    def test_income_tax_and_flat_deductions(self):
        calculated = self.calculator.calculate(SalaryCalculationInput(
            basic_salary=Decimal("100000"),
            working_days=22,
            present_days=22,
            loan_deduction=Decimal("1000"),
            advance_deduction=Decimal("500"),
            other_deductions=Decimal("250"),
        ))

        # taxable = 100000 - 1800 - 0 - 50000 = 48200
        assert calculated.income_tax == Decimal("4820")
        assert calculated.total_deductions == Decimal("8570")
        assert calculated.net_salary == Decimal("91430")

    def test_net_rounded_from_unrounded_figures(self):
        calculated = self.calculator.calculate(SalaryCalculationInput(
            basic_salary=Decimal("15000"), other_allowances=Decimal("0.5"),
            working_days=22, present_days=22,
        ))

        assert calculated.gross_earnings == Decimal("15001")
        assert calculated.esi_employee == Decimal("113")
        assert calculated.esi_employer == Decimal("488")
        assert calculated.total_deductions == Decimal("2113")
        assert calculated.net_salary == Decimal("12888")

    def test_outputs_are_whole_units(self):
        calculated = self.calculator.calculate(_input(present_days=19, overtime_hours="1.5", overtime_rate="333"))

        for value in (
            calculated.gross_earnings,
            calculated.total_deductions,
            calculated.net_salary,
            calculated.pf_employee,
            calculated.esi_employee,
            calculated.income_tax,
            calculated.attendance_deduction,
            calculated.overtime_amount,
        ):
            assert value == value.to_integral_value()

    @pytest.mark.parametrize(
        "overrides",
        [
            {},
            {"present_days": 17},
            {"basic_salary": Decimal("12345.67"), "hra": Decimal("4321.09"), "present_days": 13},
            {"basic_salary": Decimal("150000"), "performance_bonus": Decimal("12500.5")},
            {"overtime_hours": Decimal("7.25"), "overtime_rate": Decimal("412.5"), "present_days": 21},
            {"loan_deduction": Decimal("999.99"), "advance_deduction": Decimal("0.49")},
        ],
    )
    def test_net_salary_identity(self, overrides):
        calculated = self.calculator.calculate(_input(**overrides))
        salary_input = _input(**overrides)
        deductions = (
            calculated.pf_employee
            + calculated.esi_employee
            + salary_input.professional_tax
            + calculated.income_tax
            + salary_input.loan_deduction
            + salary_input.advance_deduction
            + salary_input.other_deductions
        )

        assert abs(calculated.net_salary - (calculated.gross_earnings - deductions)) <= Decimal("1")

    def test_calculation_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="payroll_kernel"):
            self.calculator.calculate(_input())

        messages = [r.getMessage() for r in caplog.records]
        assert messages == ["salary_calculation_started", "salary_calculation_completed"]
        completed = caplog.records[-1]
        assert completed.net_salary == "28850"
        assert completed.duration_ms >= 0
