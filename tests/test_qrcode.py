import os

import pytest

import constants
import util
from QRcode import QRcode
from exceptions import (
    CapacityOverflowError,
    ModuleIndexError,
    UnresolvedModuleError,
)

FINDER = [
    [1, 1, 1, 1, 1, 1, 1],
    [1, 0, 0, 0, 0, 0, 1],
    [1, 0, 1, 1, 1, 0, 1],
    [1, 0, 1, 1, 1, 0, 1],
    [1, 0, 1, 1, 1, 0, 1],
    [1, 0, 0, 0, 0, 0, 1],
    [1, 1, 1, 1, 1, 1, 1],
]


def make(text, err_corr='M', **kwargs):
    q = QRcode(err_corr=err_corr, **kwargs)
    q.add_data(text)
    q.make()
    return q


def finder_at(q, row, col):
    return [[int(q.is_dark(row + r, col + c)) for c in range(7)] for r in range(7)]


def test_hello_at_level_h():
    q = make('HELLO', 'H')

    assert q.version == 1
    assert q.get_module_count() == 21
    assert len(q.modules) == 21
    assert all(len(row) == 21 for row in q.modules)
    assert 0 <= q.mask_used <= 7

    n = q.get_module_count()
    assert finder_at(q, 0, 0) == FINDER
    assert finder_at(q, 0, n - 7) == FINDER
    assert finder_at(q, n - 7, 0) == FINDER
    assert q.is_dark(n - 8, 8)


def test_every_module_resolved():
    q = make('https://example.com/some/path?with=query', 'Q')
    for row in q.modules:
        for module in row:
            assert module is True or module is False


@pytest.mark.parametrize('err_corr, limit, version', [
    ('L', 17, 1),
    ('H', 7, 1),
    ('L', 134, 6),
    ('M', 213, 10),
])
def test_version_boundary(err_corr, limit, version):
    q = QRcode(err_corr=err_corr)
    q.add_data('a' * limit)
    assert q.best_fit() == version

    q = QRcode(err_corr=err_corr)
    q.add_data('a' * (limit + 1))
    assert q.best_fit() == version + 1


def test_boundary_text_builds():
    q = make('a' * 17, 'L')
    assert q.version == 1


def test_multibyte_text_counts_bom():
    q = make('信息论', 'H')
    # 9 bytes + BOM does not fit the 7 bytes of 1-H
    assert q.version == 2


def test_too_long_fails():
    q = QRcode(err_corr='L')
    q.add_data('a' * 2954)
    with pytest.raises(CapacityOverflowError):
        q.make()
    assert q.modules is None


def test_largest_text_fits_version_40():
    q = QRcode(err_corr='L')
    q.add_data('a' * 2953)
    assert q.best_fit() == 40


def test_forced_version_overflow():
    q = QRcode(version=1, err_corr='H')
    q.add_data('a' * 20)
    with pytest.raises(CapacityOverflowError):
        q.make(fit=False)
    assert q.modules is None
    assert q.mask_used is None
    with pytest.raises(UnresolvedModuleError):
        q.is_dark(0, 0)


def test_failed_remake_drops_previous_symbol():
    q = QRcode(version=1, err_corr='H', mask_pattern=5)
    q.add_data('HELLO')
    q.make()
    assert q.mask_used == 5

    q.add_data('a' * 20)
    with pytest.raises(CapacityOverflowError):
        q.make(fit=False)
    assert q.modules is None
    assert q.mask_used is None
    assert q.get_module_count() == 0
    with pytest.raises(UnresolvedModuleError):
        q.is_dark(0, 0)


def test_clear_forgets_fitted_version():
    q = QRcode(err_corr='M')
    q.add_data('a' * 200)
    q.make()
    assert q.version == 10

    q.clear()
    q.add_data('HELLO')
    q.make()
    assert q.version == 1
    assert q.get_module_count() == 21


def test_clear_keeps_requested_version():
    q = QRcode(version=5, err_corr='M')
    q.add_data('a' * 200)
    q.make()
    assert q.version == 10

    q.clear()
    q.add_data('HELLO')
    q.make()
    assert q.version == 5



def test_forced_mask_pattern():
    q = make('HELLO', 'H', mask_pattern=5)
    assert q.mask_used == 5


def test_mask_selection_is_deterministic():
    first = make('deterministic', 'M')
    second = make('deterministic', 'M')
    assert first.mask_used == second.mask_used
    assert first.modules == second.modules


def test_best_mask_has_lowest_penalty():
    q = QRcode(err_corr='M')
    q.add_data('penalty')
    q.best_fit()
    best = q.best_mask_pattern()

    scores = []
    for i in range(8):
        q.makeImpl(True, i)
        scores.append(util.lost_calculator(q.modules))
    assert scores[best] == min(scores)
    assert best == scores.index(min(scores))


def function_modules(version, err_corr, mask_pattern, test):
    q = QRcode(version=version, err_corr=err_corr)
    q.setup_function_patterns(test, mask_pattern)
    return {
        (r, c): module
        for r, row in enumerate(q.modules)
        for c, module in enumerate(row)
        if module is not None
    }


@pytest.mark.parametrize('version', [1, 2, 7])
def test_function_patterns_identical_across_masks(version):
    trials = [function_modules(version, constants.ERR_CORR_Q, i, True) for i in range(8)]
    for trial in trials[1:]:
        assert trial == trials[0]

    committed = [function_modules(version, constants.ERR_CORR_Q, i, False) for i in range(8)]
    for trial in committed[1:]:
        assert trial.keys() == committed[0].keys()


def test_version_info_placed():
    q = make('a' * 150, 'L')
    assert q.version == 7
    n = q.get_module_count()
    bits = util.BCH_code_version_info(7)
    for i in range(18):
        expected = ((bits >> i) & 1) == 1
        assert q.is_dark(i // 3, i % 3 + n - 11) == expected
        assert q.is_dark(i % 3 + n - 11, i // 3) == expected


def test_format_info_placed():
    q = make('HELLO', 'H')
    bits = util.BCH_code_generator((constants.ERR_CORR_H << 3) | q.mask_used)
    for i in range(6):
        assert q.is_dark(i, 8) == (((bits >> i) & 1) == 1)
    for i in range(8):
        assert q.is_dark(8, q.get_module_count() - i - 1) == (((bits >> i) & 1) == 1)


def read_codewords(q):
    '''
    Walk the committed grid in placement order and undo the mask
    '''
    fixed = QRcode(version=q.version, err_corr=q.err_corr)
    fixed.setup_function_patterns(False, q.mask_used)
    mask = util.mask_function(q.mask_used)
    n = q.get_module_count()

    bits = []
    increment = -1
    r = n - 1
    for c in range(n - 1, 0, -2):
        if c <= 6:
            c -= 1
        while True:
            for c_ in (c, c - 1):
                if fixed.modules[r][c_] is None:
                    bits.append(q.modules[r][c_] != mask(r, c_))
            r += increment
            if r < 0 or n <= r:
                r -= increment
                increment = -increment
                break

    codewords = []
    for i in range(0, len(bits) - 7, 8):
        byte = 0
        for bit in bits[i:i + 8]:
            byte = (byte << 1) | int(bit)
        codewords.append(byte)
    return codewords, fixed


@pytest.mark.parametrize('text, err_corr', [
    ('HELLO', 'H'),
    ('a' * 150, 'L'),
    ('Grüße aus 東京', 'M'),
])
def test_codewords_recovered_from_grid(text, err_corr):
    q = make(text, err_corr)
    codewords, fixed = read_codewords(q)

    assert codewords == q.data_cache

    for r, row in enumerate(fixed.modules):
        for c, module in enumerate(row):
            if module is not None:
                assert q.modules[r][c] == module


def test_is_dark_out_of_range():
    q = make('HELLO', 'H')
    with pytest.raises(ModuleIndexError):
        q.is_dark(21, 0)
    with pytest.raises(ModuleIndexError):
        q.is_dark(0, -1)


def test_is_dark_before_make():
    q = QRcode()
    q.add_data('HELLO')
    with pytest.raises(UnresolvedModuleError):
        q.is_dark(0, 0)


def test_invalid_arguments():
    with pytest.raises(ValueError):
        QRcode(err_corr='X')
    with pytest.raises(ValueError):
        QRcode(version=41)
    with pytest.raises(ValueError):
        QRcode(mask_pattern=8)
    with pytest.raises(ValueError):
        QRcode(border=-1)


def test_err_corr_accepts_code():
    assert QRcode(err_corr=constants.ERR_CORR_H).err_corr == QRcode(err_corr='h').err_corr


def test_get_mat_adds_border():
    q = make('HELLO', 'H', border=2)
    mat = q.get_mat()
    assert len(mat) == 25
    assert all(len(row) == 25 for row in mat)
    assert not any(mat[0])
    assert mat[2][2:23] == q.modules[0]


def test_make_image(tmp_path):
    q = make('HELLO', 'H', box_size=2)
    path = q.make_image(name='hello', save_dir=str(tmp_path))
    with open(path, 'rb') as f:
        assert f.read(8) == b'\x89PNG\r\n\x1a\n'


def test_make_image_default_name_from_url(tmp_path):
    q = make('https://example.com/a/b?c=d', 'M', box_size=1)
    path = q.make_image(save_dir=str(tmp_path))

    assert os.path.dirname(path) == str(tmp_path)
    assert os.path.exists(path)
    name = os.path.basename(path)
    assert '/' not in name and '?' not in name and ':' not in name
    assert name.endswith('.png')


def test_data_positions_cover_free_modules():
    q = QRcode(version=7, err_corr='L')
    q.setup_function_patterns(False, 0)
    positions = list(q.data_positions())

    assert len(positions) == len(set(positions))
    assert positions[0] == (44, 44)
    assert all(c != 6 for _, c in positions)
    free = sum(module is None for row in q.modules for module in row)
    assert len(positions) == free
    # 196 codewords at version 7, no remainder bits beyond 14
    assert 196 * 8 <= free <= 196 * 8 + 14


def test_type_info_positions_are_distinct():
    q = QRcode(version=1)
    q.modules_cnt = 21
    around_corner, split = q.type_info_positions()
    assert len(around_corner) == len(split) == 15
    assert not set(around_corner) & set(split)
    assert (8, 6) not in around_corner and (6, 8) not in around_corner
