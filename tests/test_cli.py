"""
命令行测试 / CLI Tests
==================
"""

import logging
import re

from click.testing import CliRunner

from ukf_fusion.cli import cli
from ukf_fusion import utils
from ukf_fusion.utils import setup_logger, get_logger

TELEMETRY_LINE = re.compile(r"^-?\d+\.\d{3}( -?\d+\.\d{3})+$")


def telemetry_lines(output: str):
    return [line for line in output.splitlines() if TELEMETRY_LINE.match(line)]


class TestRunCommand:
    """测试run命令 / Test run command"""

    def test_angle_mode(self):
        result = CliRunner().invoke(
            cli, ['run', '--ticks', '5', '--period-ms', '1', '--log-level', 'WARNING']
        )
        assert result.exit_code == 0, result.output
        lines = telemetry_lines(result.stdout)
        assert len(lines) == 5
        assert all(len(line.split()) == 3 for line in lines)

    def test_position_mode(self):
        result = CliRunner().invoke(
            cli, ['run', '-n', '4', '-m', 'position', '--period-ms', '1', '--log-level', 'WARNING']
        )
        assert result.exit_code == 0, result.output
        lines = telemetry_lines(result.stdout)
        assert len(lines) == 4
        assert all(len(line.split()) == 4 for line in lines)

    def test_plot(self, tmp_path):
        path = tmp_path / "trace.png"
        result = CliRunner().invoke(
            cli, ['run', '-n', '10', '--period-ms', '1', '--plot', str(path), '--log-level', 'WARNING']
        )
        assert result.exit_code == 0, result.output
        assert path.exists()
        assert path.stat().st_size > 0

    def test_invalid_noise(self):
        result = CliRunner().invoke(cli, ['run', '-n', '1', '--noise', '-1'])
        assert result.exit_code != 0
        assert "noise_amplitude" in result.output

    def test_invalid_mode(self):
        result = CliRunner().invoke(cli, ['run', '-n', '1', '--mode', 'polar'])
        assert result.exit_code != 0

    def test_help_documents_period_and_interrupt(self):
        result = CliRunner().invoke(cli, ['run', '--help'])
        assert result.exit_code == 0
        text = ' '.join(result.output.split())
        assert 'physics step stays at SS_DT' in text
        assert 'plot time axis uses SS_DT' in text
        assert 'summary covers completed ticks only' in text


class TestLogger:
    """测试日志工具 / Test logging utilities"""

    def test_setup_logger_level(self):
        logger = setup_logger(level="DEBUG")
        assert logger.name == "ukf_fusion"
        assert logger.level == logging.DEBUG
        assert logger.handlers
        setup_logger(level="INFO")
        assert logger.level == logging.INFO

    def test_module_logger_is_child(self):
        logger = get_logger("ukf_fusion.loop.controller")
        assert logger.parent.name in ("ukf_fusion.loop", "ukf_fusion")
        assert get_logger().name == __name__

    def test_utils_exports(self):
        assert utils.__all__ == ["setup_logger", "get_logger", "log_info"]
