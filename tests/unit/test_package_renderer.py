"""Tests for the rich pay package renderer."""

import io

from rich.console import Console

from staffcalc.cli.renderers.package_renderer import render_package
from staffcalc.sdk.calculator import calculate


def render(result):
    console = Console(file=io.StringIO(), record=True, width=160)
    render_package(console, result)
    return console


def line_with(text, output):
    return next(line for line in output.splitlines() if text in line)


class TestRenderPackage:

    def test_sample_package(self, sample_package):
        output = render(calculate(sample_package)).export_text()
        assert "Sarah Johnson" in output
        assert "$2,900.00" in output
        assert "-$598.0" in output

    def test_tiny_negative_amounts_render_as_zero(self):
        result = calculate({"taxableStipend": "-0.001"})
        assert result.weekly_net_pay < 0
        output = render(result).export_text()
        assert "-$0.00" not in output
        assert "$0.00" in line_with("NET PAY", output)

    def test_negative_net_pay_is_red(self):
        result = calculate({"taxableStipend": -500})
        assert result.weekly_net_pay < 0
        styled = render(result).export_text(styles=True)
        net_line = line_with("NET PAY", styled)
        assert "\x1b[1;31m" in net_line
        assert "\x1b[1;32m" not in net_line

    def test_positive_net_pay_is_green(self, sample_package):
        styled = render(calculate(sample_package)).export_text(styles=True)
        assert "\x1b[1;32m" in line_with("NET PAY", styled)
