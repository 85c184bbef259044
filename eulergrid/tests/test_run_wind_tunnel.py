"""
Pytest tests for the command line runner (headless mode only).
"""

import json
import logging

import numpy as np
import pytest

from eulergrid.scripts.run_wind_tunnel import main, setup_logging


class TestHeadless:

    def test_runs_frames(self, capsys):
        code = main(['--headless', '--frames', '20', '--width', '20', '--height', '15',
                     '--scheme', 'diffusion', '--obstacle', 'disc'])
        out = capsys.readouterr().out

        assert code == 0
        assert "20x15" in out
        assert "Frame 0010" in out
        assert "Frame 0020" in out

    def test_config_file_with_override(self, tmp_path, capsys):
        path = tmp_path / "tunnel.json"
        path.write_text(json.dumps({'width': 12, 'height': 10, 'inlet_width': 4,
                                    'scheme': 'diffusion'}))

        code = main(['--config', str(path), '--height', '9', '--headless', '--frames', '1'])

        assert code == 0
        assert "12x9" in capsys.readouterr().out

    def test_save_config(self, tmp_path):
        path = tmp_path / "saved.json"
        main(['--headless', '--frames', '1', '--width', '10', '--height', '10',
              '--scheme', 'diffusion', '--save-config', str(path)])

        saved = json.loads(path.read_text())
        assert saved['width'] == 10
        assert saved['scheme'] == 'diffusion'

    def test_invalid_size(self):
        with pytest.raises(SystemExit):
            main(['--headless', '--width', '2'])

    def test_instability_reported(self, tmp_path, capsys):
        path = tmp_path / "unstable.json"
        path.write_text(json.dumps({'width': 10, 'height': 10, 'inlet_width': 2,
                                    'air_density': 0.0, 'obstacle': 'none'}))

        with pytest.warns(RuntimeWarning):
            code = main(['--config', str(path), '--headless', '--frames', '5'])

        assert code == 1
        assert "unstable" in capsys.readouterr().err


class TestPressureSchemeCli:

    def test_divergence_reported(self, capsys):
        with np.errstate(all='ignore'):
            code = main(['--headless', '--frames', '50', '--scheme', 'pressure'])
        captured = capsys.readouterr()

        assert code == 1
        assert "unstable" in captured.err


class TestLogging:

    def test_single_handler_across_runs(self):
        for _ in range(3):
            setup_logging(verbose=True, very_verbose=False)
        assert len(logging.getLogger("eulergrid").handlers) == 1
        assert logging.getLogger("eulergrid").level == logging.INFO

if __name__ == "__main__":
    pytest.main([__file__, "-v"])
