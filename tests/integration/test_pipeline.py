"""End-to-end tests: strokes -> raster -> tensor -> engine -> ranked glyphs.

Covers the three reference scenarios plus the command-line entry point
driven by a small TorchScript model.

Run with:
    $ python3 -m pytest tests/integration -v
"""

import json

import numpy as np
import pytest
import torch
import torch.nn as nn
from PIL import Image

from ink_lib.cli import load_strokes, main
from ink_lib.config import RecognizerConfig
from ink_lib.domain.geometry import Point
from ink_lib.errors import EmptyCaptureError
from ink_lib.recognition.engine import CallableInferenceEngine
from ink_lib.recognition.recognizer import Recognizer
from ink_lib.utils.geometry import compute_bounds, fit_transform
from ink_lib.utils.rendering import capture
from ink_lib.utils.tensor import encode_raster

from conftest import HIRAGANA_INDICES, LABELS, make_session

pytestmark = pytest.mark.integration


class FixedScores(nn.Module):
    """Model that ignores its input and returns preset scores."""

    def __init__(self, scores):
        super().__init__()
        self.register_buffer('scores', torch.tensor(scores, dtype=torch.float32))

    def forward(self, x):
        return self.scores.unsqueeze(0).expand(x.shape[0], -1)


# -----------------------------------------------------------------------------
# Reference scenarios
# -----------------------------------------------------------------------------

def test_scenario_collinear_stroke_geometry(horizontal_snapshot):
    """(10,10),(50,10),(90,10) with padding 6 -> (4,4)-(96,16), scale 1."""
    config = RecognizerConfig(canvas_size=300, stroke_width=12, min_size=80, max_size=220)
    bbox = compute_bounds(horizontal_snapshot, padding=config.padding, extent=config.canvas_size)
    assert bbox.to_tuple() == (4, 4, 96, 16)

    transform = fit_transform(bbox, config.canvas_size, config.min_size, config.max_size)
    assert transform.scale_factor == 1.0
    assert transform.apply(bbox.center) == Point(150, 150)
    assert transform.apply(Point(10, 10)) == Point(110, 150)
    assert transform.apply(Point(90, 10)) == Point(190, 150)

    tensor = encode_raster(capture(horizontal_snapshot, config), config.input_size)
    assert tensor.shape == (1, 64, 64, 1)
    # Ink row vs. paper rows well above and below it
    assert tensor[0, 32, 32, 0] > 0.5
    assert tensor[0, 20, 32, 0] < 0.05
    assert tensor[0, 44, 32, 0] < 0.05


def test_scenario_top_filtered_score_has_full_confidence(recognizer, horizontal_snapshot):
    results = recognizer.recognize_session(horizontal_snapshot)
    assert results[0].glyph == 'う'
    assert results[0].confidence == 1.0


def test_scenario_out_of_alphabet_winner_excluded(horizontal_snapshot):
    scores = np.zeros(len(LABELS), dtype=np.float32)
    scores[3] = 0.95   # '亜', not hiragana
    scores[6] = 0.03   # 'え'
    scores[1] = 0.01   # 'あ'
    rec = Recognizer(engine=CallableInferenceEngine(lambda t: scores))
    rec.initialize(labels=LABELS)

    results = rec.recognize_session(horizontal_snapshot)
    glyphs = [r.glyph for r in results]
    assert '亜' not in glyphs
    assert glyphs[0] == 'え'
    assert results[0].confidence == 1.0


def test_results_bounded_sorted_and_in_alphabet(recognizer):
    session = make_session([(20, 20), (120, 80), (40, 160)], [(200, 30), (210, 200)])
    results = recognizer.recognize_session(session)
    confidences = [r.confidence for r in results]
    assert len(results) <= recognizer.config.top_k
    assert confidences == sorted(confidences, reverse=True)
    assert all(0.0 <= c <= 1.0 for c in confidences)
    allowed = {LABELS[i][0] for i in HIRAGANA_INDICES}
    assert {r.glyph for r in results} <= allowed


def test_clear_then_recognize_is_empty_not_crash(recognizer):
    session = make_session([(10, 10), (90, 90)])
    session.clear()
    assert recognizer.capture(session) is None
    with pytest.raises(EmptyCaptureError):
        recognizer.recognize_session(session)


def test_mid_stroke_capture_includes_active_stroke(recognizer):
    session = make_session()
    session.begin_stroke(Point(10, 10))
    session.extend_stroke(Point(90, 10))
    raster = recognizer.capture(session)
    assert raster is not None
    assert raster.getpixel((150, 150)) == (0, 0, 0)


# -----------------------------------------------------------------------------
# Command line
# -----------------------------------------------------------------------------

@pytest.fixture
def strokes_file(tmp_path):
    path = tmp_path / 'strokes.json'
    path.write_text(json.dumps({'strokes': [[[10, 10], [50, 10], [90, 10]]]}), encoding='utf-8')
    return path


@pytest.fixture
def model_files(tmp_path):
    scores = [0.02, 0.10, 0.05, 0.30, 0.40, 0.01, 0.07, 0.05]
    model_path = tmp_path / 'model.pt'
    torch.jit.script(FixedScores(scores)).save(str(model_path))
    labels_path = tmp_path / 'labels.txt'
    labels_path.write_text('\n'.join(LABELS) + '\n', encoding='utf-8')
    return model_path, labels_path


def test_load_strokes_accepts_bare_list(tmp_path):
    path = tmp_path / 'bare.json'
    path.write_text(json.dumps([[[1, 2], [3, 4]], []]), encoding='utf-8')
    snap = load_strokes(path)
    assert len(snap.strokes) == 1


def test_load_strokes_rejects_other_json(tmp_path):
    path = tmp_path / 'bad.json'
    path.write_text(json.dumps({'points': []}), encoding='utf-8')
    with pytest.raises(ValueError):
        load_strokes(path)


def test_cli_render(strokes_file, tmp_path):
    out = tmp_path / 'capture.png'
    assert main(['render', str(strokes_file), '--out', str(out)]) == 0
    image = Image.open(out)
    assert image.size == (300, 300)


def test_cli_encode(strokes_file, tmp_path):
    out = tmp_path / 'tensor.npy'
    assert main(['encode', str(strokes_file), '--out', str(out)]) == 0
    tensor = np.load(out)
    assert tensor.shape == (1, 64, 64, 1)


def test_cli_render_empty_input(tmp_path):
    path = tmp_path / 'empty.json'
    path.write_text('[]', encoding='utf-8')
    assert main(['render', str(path), '--out', str(tmp_path / 'x.png')]) == 1


def test_cli_recognize_json(strokes_file, model_files, capsys):
    model_path, labels_path = model_files
    code = main(['recognize', str(strokes_file), '--model', str(model_path),
                 '--labels', str(labels_path), '--device', 'cpu',
                 '--top-k', '3', '--json'])
    assert code == 0
    results = json.loads(capsys.readouterr().out)
    assert len(results) == 3
    assert results[0] == {'glyph': 'う', 'confidence': 1.0}


def test_cli_recognize_missing_model(strokes_file, tmp_path):
    labels_path = tmp_path / 'labels.txt'
    labels_path.write_text('あ\n', encoding='utf-8')
    code = main(['recognize', str(strokes_file), '--model', str(tmp_path / 'none.pt'),
                 '--labels', str(labels_path), '--device', 'cpu'])
    assert code == 2


def test_cli_config_override(strokes_file, tmp_path):
    config_path = tmp_path / 'config.json'
    config_path.write_text(json.dumps({'canvas_size': 128}), encoding='utf-8')
    out = tmp_path / 'capture.png'
    assert main(['--config', str(config_path), 'render', str(strokes_file),
                 '--out', str(out)]) == 0
    assert Image.open(out).size == (128, 128)
