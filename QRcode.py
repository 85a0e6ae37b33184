import logging
import os
import re

import numpy as np
from matplotlib import pyplot as plt

import constants
import util
from exceptions import (
    CapacityOverflowError,
    ModuleIndexError,
    QRError,
    UnresolvedModuleError,
)

logger = logging.getLogger(__name__)


def _check_err_corr(err_corr):
    if isinstance(err_corr, str):
        if err_corr.upper() not in constants.ERR_CORR_LEVELS:
            raise ValueError(f"Invalid error correction level {err_corr!r}")
        return constants.ERR_CORR_LEVELS[err_corr.upper()]
    if err_corr not in constants.ERR_CORR_OFFSET:
        raise ValueError(f"Invalid error correction level {err_corr!r}")
    return int(err_corr)


class QRcode:
    def __init__(self, version = None,
                err_corr = constants.ERR_CORR_M,
                box_size = 10, border = 4,
                mask_pattern = None):
        if box_size < 0 or border < 0:
            raise ValueError('Expect box size and border > 0.')
        if version is not None and not constants.MIN_VERSION <= int(version) <= constants.MAX_VERSION:
            raise ValueError(f"Invalid version {version}")
        if mask_pattern is not None and not 0 <= mask_pattern <= 7:
            raise ValueError(f"Invalid mask pattern {mask_pattern}")
        self.requested_version = version and int(version)
        self.err_corr = _check_err_corr(err_corr)
        self.box_size = int(box_size)
        self.border = int(border)
        self.mask_pattern = mask_pattern
        self.clear()

    def clear(self):
        '''
        Reset all data
        '''
        self.version = self.requested_version
        self.modules = None
        self.modules_cnt = 0 # No of modules/side
        self.data_cache = None
        self.data_list = []
        self.mask_used = None

    def add_data(self, data):
        '''
        Add data to QRcode
        '''
        if isinstance(data, util.QRData):
            self.data_list.append(data)
        else:
            self.data_list.append(util.QRData(data))
        self.data_cache = None

    def make(self, fit = True):
        '''
        A wrapper
        Version selection + Data Encodation + Error Correction Coding + Placement in Matrix
        :param fit: True -> use best_fit to find an optimal size(version)
        '''
        self.modules = None
        self.modules_cnt = 0
        self.mask_used = None
        try:
            if fit or self.version is None:
                self.best_fit(start=self.requested_version)
            if self.data_cache is None:
                self.data_cache = util.create_data(self.version, self.err_corr, self.data_list)

            if self.mask_pattern is None:
                mask_pattern = self.best_mask_pattern()
            else:
                mask_pattern = self.mask_pattern
            self.makeImpl(False, mask_pattern)
        except QRError:
            # a failed generation leaves no symbol behind
            self.modules = None
            self.modules_cnt = 0
            raise
        self.mask_used = mask_pattern
        logger.debug("committed version %d, mask %d", self.version, mask_pattern)

    def best_fit(self, start = None):
        '''
        Smallest version whose byte mode capacity holds the data
        '''
        if start is None:
            start = constants.MIN_VERSION
        if start < constants.MIN_VERSION or start > constants.MAX_VERSION:
            raise ValueError("Invalid version")

        length = sum(util.utf8_length(data.text) for data in self.data_list)
        column = constants.ERR_CORR_OFFSET[self.err_corr]

        for version in range(start, constants.MAX_VERSION + 1):
            if length <= constants.LIMIT_LENGTH[version - 1][column]:
                break
        else:
            raise CapacityOverflowError(
                f"Too long data: {length} bytes exceed version {constants.MAX_VERSION}")

        if version != self.version:
            self.data_cache = None
        self.version = version
        logger.debug("%d bytes -> version %d", length, version)
        return self.version

    def best_mask_pattern(self):
        '''
        Find the optimal mask pattern, the lowest pattern wins a tie
        '''
        mask_pattern = 0
        min_lost_needed = 0

        for i in range(8):
            self.makeImpl(True, i)

            lost_current = util.lost_calculator(self.modules)
            logger.debug("mask %d: %s penalty points", i, lost_current)

            if i == 0 or min_lost_needed > lost_current:
                min_lost_needed = lost_current
                mask_pattern = i

        return mask_pattern

    def makeImpl(self, test, mask_pattern):
        '''
        Make mat
        :param test: True while searching the mask, format/version bits are left light
        '''
        self.setup_function_patterns(test, mask_pattern)

        if self.data_cache is None:
            self.data_cache = util.create_data(self.version, self.err_corr, self.data_list)

        self.mapping(self.data_cache, mask_pattern)

    def setup_function_patterns(self, test, mask_pattern):
        '''
        Everything but the data modules, these are left as None
        '''
        if self.version is None or not constants.MIN_VERSION <= self.version <= constants.MAX_VERSION:
            raise ValueError('Invalid version')
        self.modules_cnt = self.version * 4 + 17
        self.modules = [[None] * self.modules_cnt for _ in range(self.modules_cnt)]

        self.setup_finder_pattern(0, 0)
        self.setup_finder_pattern(self.modules_cnt - 7, 0)
        self.setup_finder_pattern(0, self.modules_cnt - 7)
        self.setup_position_align_pattern()
        self.setup_timing_pattern()
        self.setup_type_info(test, mask_pattern)

        if self.version >= 7:
            self.setup_version_info(test)

    def setup_finder_pattern(self, row, col):
        '''
        7*7 finder pattern with its light separator, clipped to the grid
        '''
        for r in range(max(row - 1, 0), min(row + 8, self.modules_cnt)):
            for c in range(max(col - 1, 0), min(col + 8, self.modules_cnt)):
                # square rings around the centre module (row + 3, col + 3)
                ring = max(abs(r - row - 3), abs(c - col - 3))
                self.modules[r][c] = ring in (0, 1, 3)

    def setup_position_align_pattern(self):
        '''
        5*5 alignment patterns, centres taken pairwise from the position table
        '''
        pos = util.pattern_position(self.version)
        for row in pos:
            for col in pos:
                if self.modules[row][col] is not None:
                    continue

                for r in range(-2, 3):
                    for c in range(-2, 3):
                        self.modules[row + r][col + c] = max(abs(r), abs(c)) != 1

    def setup_timing_pattern(self):
        '''
        Alternating modules on row 6 and column 6 between the finders
        '''
        for i in range(8, self.modules_cnt - 8):
            if self.modules[i][6] is None:
                self.modules[i][6] = i % 2 == 0
            if self.modules[6][i] is None:
                self.modules[6][i] = i % 2 == 0

    def type_info_positions(self):
        '''
        Where bit i of the format information goes, once next to the
        top-left finder and once split between the other two
        '''
        n = self.modules_cnt
        around_corner = (
            [(i, 8) for i in range(6)] + [(7, 8), (8, 8), (8, 7)]
            + [(8, 5 - i) for i in range(6)])
        split = (
            [(8, n - 1 - i) for i in range(8)]
            + [(n - 7 + i, 8) for i in range(7)])
        return around_corner, split

    def setup_type_info(self, test, mask_pattern):
        '''
        error correction level + mask pattern, BCH(15, 5)
        '''
        bits = util.BCH_code_generator((self.err_corr << 3) | mask_pattern)

        for positions in self.type_info_positions():
            for i, (r, c) in enumerate(positions):
                self.modules[r][c] = not test and bool((bits >> i) & 1)

        # always dark
        self.modules[self.modules_cnt - 8][8] = True

    def setup_version_info(self, test):
        '''
        Two mirrored 6*3 blocks for version >= 7, BCH(18, 6)
        '''
        bits = util.BCH_code_version_info(self.version)

        for i in range(18):
            dark = not test and bool((bits >> i) & 1)
            near, far = i // 3, i % 3 + self.modules_cnt - 11
            self.modules[near][far] = dark
            self.modules[far][near] = dark

    def data_positions(self):
        '''
        Free modules in placement order: column pairs from the bottom
        right, alternately upwards and downwards, skipping column 6
        See in 8.7.3
        '''
        upward = True
        right = self.modules_cnt - 1
        while right > 0:
            if right == 6:
                right -= 1
            rows = range(self.modules_cnt - 1, -1, -1) if upward else range(self.modules_cnt)
            for r in rows:
                for c in (right, right - 1):
                    if self.modules[r][c] is None:
                        yield r, c
            upward = not upward
            right -= 2

    def mapping(self, data, mask_pattern):
        '''
        Codeword bits, most significant first, XOR the mask.
        Modules left over after the last codeword are masked zeros.
        '''
        mask_func = util.mask_function(mask_pattern)
        bit_count = len(data) * 8

        for bit_index, (r, c) in enumerate(self.data_positions()):
            dark = (bit_index < bit_count
                    and bool((data[bit_index // 8] >> (7 - bit_index % 8)) & 1))
            self.modules[r][c] = dark != mask_func(r, c)

    def get_module_count(self):
        return self.modules_cnt

    def is_dark(self, row, col):
        if self.modules is None:
            raise UnresolvedModuleError("QR code has not been made yet")
        if not (0 <= row < self.modules_cnt and 0 <= col < self.modules_cnt):
            raise ModuleIndexError(f"{row},{col}")
        module = self.modules[row][col]
        if module is None:
            raise UnresolvedModuleError(f"module not set at ({row}, {col})")
        return module

    def get_mat(self):
        '''
        Return the Qrcode in mat, with a light border of self.border modules
        '''

        if self.mask_used is None:
            self.make()

        if not self.border:
            return util.copy_mat(self.modules)

        mat_size_with_border = self.modules_cnt + 2 * self.border
        mat = [[False] * mat_size_with_border for _ in range(self.border)]
        margin = [False] * self.border
        for module in self.modules:
            mat.append(margin + module + margin)
        mat.extend([False] * mat_size_with_border for _ in range(self.border))

        return mat

    def save_image(self, fp):
        '''
        Write a png of the mat to a path or a binary file object
        '''
        array = np.array(self.get_mat(), int)
        inches = len(array) * self.box_size / 100

        fig = plt.figure(frameon=False)
        fig.set_size_inches(inches, inches)
        ax = plt.Axes(fig, [0., 0., 1., 1.])
        ax.set_axis_off()
        fig.add_axes(ax)

        ax.imshow(array, 'gray_r', interpolation='nearest')
        fig.savefig(fp, format='png', dpi=100)
        plt.close(fig)

    def make_image(self, name = None, save_dir = None):
        '''
        Make QRcode image
        param: name without suffix
        '''
        if save_dir is None:
            save_dir = 'MyQrCode'

        os.makedirs(save_dir, exist_ok=True)

        if name is None:
            name = ''.join(repr(data) for data in self.data_list).replace('\'', '')
            name = re.sub(r"[^\w.-]+", "_", name)[:15]

        path = os.path.join(save_dir, name + '.png')
        self.save_image(path)
        return path


if __name__ == '__main__':
    q = QRcode(err_corr='H')
    q.add_data('信息论')
    print(q.make_image(name='information theory'))
