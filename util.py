from urllib.parse import quote

import constants
from exceptions import (
    CapacityOverflowError,
    FieldOperandError,
    PolynomialError,
    TableLookupError,
)

# GF(256) tables, generated by x^8 + x^4 + x^3 + x^2 + 1

def _build_tables():
    exponents = list(range(256))
    log = list(range(256))

    for i in range(8):
        exponents[i] = 1 << i

    for i in range(8, 256):
        exponents[i] = (exponents[i - 4] ^ exponents[i - 5]
                        ^ exponents[i - 6] ^ exponents[i - 8])

    for i in range(255):
        log[exponents[i]] = i

    return tuple(exponents), tuple(log)

EXP_TABLE, LOG_TABLE = _build_tables()


def glog(n):
    if n < 1:
        raise FieldOperandError(f"glog({n})")
    return LOG_TABLE[n]

def gexp(n):
    # the multiplicative group has order 255
    return EXP_TABLE[n % 255]


class Polynomial:
    '''
    Polynomial over GF(256), highest degree coefficient first
    shift zeros are appended, i.e. the polynomial is multiplied by x^shift
    '''

    def __init__(self, num, shift):
        if not num:
            raise PolynomialError(f"{len(num) if num is not None else None}/{shift}")

        offset = 0
        while offset < len(num) and num[offset] == 0:
            offset += 1

        self.num = tuple(num[offset:]) + (0,) * shift

    def __getitem__(self, index):
        return self.num[index]

    def __iter__(self):
        return iter(self.num)

    def __len__(self):
        return len(self.num)

    def __eq__(self, other):
        return isinstance(other, Polynomial) and self.num == other.num

    def __repr__(self):
        return f"Polynomial({list(self.num)})"

    def __mul__(self, other):
        num = [0] * (len(self) + len(other) - 1)

        for i, item in enumerate(self):
            if not item:
                continue
            for j, other_item in enumerate(other):
                if other_item:
                    num[i + j] ^= gexp(glog(item) + glog(other_item))

        return Polynomial(num, 0)

    def __mod__(self, other):
        result = self
        while len(result) >= len(other):
            difference = len(result) - len(other)
            ratio = glog(result[0]) - glog(other[0])

            num = [
                item ^ gexp(glog(other_item) + ratio)
                for item, other_item in zip(result, other)]
            if difference:
                num.extend(result[-difference:])

            # leading term cancels, so every pass lowers the degree
            result = Polynomial(num, 0)
        return result


def error_correct_polynomial(ec_count):
    '''
    Generator polynomial (x - a^0)(x - a^1)...(x - a^(ec_count - 1))
    '''
    poly = Polynomial([1], 0)
    for i in range(ec_count):
        poly = poly * Polynomial([1, gexp(i)], 0)
    return poly


class RSBlock:

    def __init__(self, total_count, data_count):
        self.total_count = total_count
        self.data_count = data_count

    def __repr__(self):
        return f"RSBlock({self.total_count}, {self.data_count})"

    def __eq__(self, other):
        return (isinstance(other, RSBlock)
                and (self.total_count, self.data_count)
                == (other.total_count, other.data_count))


def rs_blocks(version, err_corr):
    if (err_corr not in constants.ERR_CORR_OFFSET
            or not constants.MIN_VERSION <= version <= constants.MAX_VERSION):
        raise TableLookupError(
            f"bad rs block @ version: {version} / error_correction: {err_corr}")
    offset = constants.ERR_CORR_OFFSET[err_corr]
    rs_block = constants.RS_BLOCK_TABLE[(version - 1) * 4 + offset]

    blocks = []

    for i in range(0, len(rs_block), 3):
        count, total_count, data_count = rs_block[i:i + 3]
        for _ in range(count):
            blocks.append(RSBlock(total_count, data_count))

    return blocks


def pattern_position(version):
    if not constants.MIN_VERSION <= version <= constants.MAX_VERSION:
        raise TableLookupError(f"no alignment pattern position for version {version}")
    return constants.PATTERN_POSITION[version - 1]


class BitBuffer:
    '''
    Append-only bit sequence, most significant bit first in each byte
    '''
    def __init__(self):
        self.buffer = []
        self.length = 0

    def __repr__(self):
        return '.'.join([str(n) for n in self.buffer])

    def __len__(self):
        return self.length

    def get(self, index):
        '''
        Gets the n-th bit
        '''
        buf_index = index // 8
        position = index % 8
        return ((self.buffer[buf_index] >> (7 - position)) & 1) == 1

    def put_bit(self, bit):
        '''
        Appends one bit, growing the backing bytes when needed
        '''
        buf_index = self.length // 8
        if len(self.buffer) <= buf_index:
            self.buffer.append(0)
        if bit:
            self.buffer[buf_index] |= 0x80 >> (self.length % 8)
        self.length += 1

    def put(self, num, length):
        '''
        Appends the low `length` bits of num
        '''
        for i in range(length):
            self.put_bit(((num >> (length - i - 1)) & 1) == 1)


def to_byte_sequence(text):
    '''
    Encode every code point with the UTF-8 bit layout.
    A BOM is prepended as soon as some character needed more than one byte.
    '''
    parsed = []
    for char in text:
        code = ord(char)
        if code > 0x10000:
            parsed += [
                0xF0 | ((code & 0x1C0000) >> 18),
                0x80 | ((code & 0x3F000) >> 12),
                0x80 | ((code & 0xFC0) >> 6),
                0x80 | (code & 0x3F),
            ]
        elif code > 0x800:
            parsed += [
                0xE0 | ((code & 0xF000) >> 12),
                0x80 | ((code & 0xFC0) >> 6),
                0x80 | (code & 0x3F),
            ]
        elif code > 0x80:
            parsed += [
                0xC0 | ((code & 0x7C0) >> 6),
                0x80 | (code & 0x3F),
            ]
        else:
            parsed.append(code)

    if len(parsed) != len(text):
        parsed[:0] = constants.UTF8_BOM

    return bytes(parsed)


# QRcode valid data type
class QRData:
    '''
    Byte segment of a QR code
    '''
    def __init__(self, data):
        self.mode = constants.EIGHT_BIT_BYTE_MODE
        self.text = data
        if isinstance(data, bytes):
            self.data = data
        else:
            self.data = to_byte_sequence(data)

    def __len__(self):
        return len(self.data)

    def write(self, buffer):
        for c in self.data:
            buffer.put(c, 8)

    def __repr__(self):
        return repr(self.text)


def utf8_length(text):
    '''
    Length used to pick the version: every percent escape counts as one
    character, three more if anything was escaped
    '''
    if isinstance(text, bytes):
        return len(text)
    replaced = constants.RE_PERCENT_ESCAPE.sub(
        'a', quote(text, safe=constants.URI_SAFE))
    return len(replaced) + (3 if len(replaced) != len(text) else 0)


def bits_number_for_version(version):
    if constants.MIN_VERSION <= version < 10:
        return constants.MODE_SIZE_SMALL
    elif 10 <= version < 27:
        return constants.MODE_SIZE_MEDIUM
    elif 27 <= version <= constants.MAX_VERSION:
        return constants.MODE_SIZE_LARGE
    raise TableLookupError(f"no count indicator size for version {version}")

def length_in_bits(mode, version):
    bits_number = bits_number_for_version(version)
    if mode not in bits_number:
        raise TableLookupError(f"Invalid mode: {mode}")
    return bits_number[mode]

def copy_mat(x):
    return [row[:] for row in x]

def BCH_remainder(data, generator):
    '''
    Remainder of data * x^degree(generator) divided by generator, over GF(2)
    '''
    degree = generator.bit_length() - 1
    remainder = data << degree
    while remainder.bit_length() > degree:
        remainder ^= generator << (remainder.bit_length() - 1 - degree)
    return remainder

def BCH_code_generator(data):
    '''
    Format information: 5 data bits + 10 BCH bits, XOR with mask
    See Annex C
    '''
    return ((data << 10) | BCH_remainder(data, constants.G15)) ^ constants.G15_MASK

def BCH_code_version_info(data):
    '''
    Version information: 6 data bits + 12 BCH bits
    See Annex D
    '''
    return (data << 12) | BCH_remainder(data, constants.G18)

def create_data(version, err_corr, datalist):
    '''
    Data encodation process, returns the final codeword sequence
    '''
    buffer = BitBuffer()
    for data in datalist:
        buffer.put(data.mode, 4)
        buffer.put(len(data), length_in_bits(data.mode, version))
        data.write(buffer)

    # Calculate the maximum bits
    blocks = rs_blocks(version, err_corr)
    max_bit = sum(b.data_count * 8 for b in blocks)
    if len(buffer) > max_bit:
        raise CapacityOverflowError(
            f"code length overflow. ({len(buffer)} > {max_bit})")

    # Terminate
    if len(buffer) + 4 <= max_bit:
        buffer.put(0, 4)

    while len(buffer) % 8:
        buffer.put_bit(False)

    # Fill with padding codewords
    i = 0
    while len(buffer) < max_bit:
        buffer.put(constants.PAD1 if i % 2 else constants.PAD0, 8)
        i += 1

    return create_bytes(buffer, blocks)

def create_bytes(buffer, blocks):
    '''
    Compute error correction codewords per block and interleave
    See 8.6
    '''
    offset = 0

    max_data_cnt = 0
    max_err_cnt = 0

    data_encode = [None] * len(blocks)
    err_encode = [None] * len(blocks)
    generators = {}

    for r, block in enumerate(blocks):
        data_cnt = block.data_count
        err_cnt = block.total_count - data_cnt

        max_data_cnt = max(max_data_cnt, data_cnt)
        max_err_cnt = max(max_err_cnt, err_cnt)

        data_encode[r] = [0xff & b for b in buffer.buffer[offset:offset + data_cnt]]
        offset += data_cnt

        if err_cnt not in generators:
            generators[err_cnt] = error_correct_polynomial(err_cnt)
        poly = generators[err_cnt]

        raw_poly = Polynomial(data_encode[r], len(poly) - 1)
        mod_poly = raw_poly % poly

        # left-pad the remainder with zeros
        err_encode[r] = [0] * (len(poly) - 1)
        for i in range(len(err_encode[r])):
            mod_index = len(mod_poly) - len(err_encode[r]) + i
            err_encode[r][i] = mod_poly[mod_index] if mod_index >= 0 else 0

    data = []

    for i in range(max_data_cnt):
        for r in range(len(blocks)):
            if i < len(data_encode[r]):
                data.append(data_encode[r][i])

    for i in range(max_err_cnt):
        for r in range(len(blocks)):
            if i < len(err_encode[r]):
                data.append(err_encode[r][i])

    return data

# Data mask conditions, i = row, j = column, see Table 23
MASK_FUNCTIONS = (
    lambda i, j: (i + j) % 2 == 0,
    lambda i, j: i % 2 == 0,
    lambda i, j: j % 3 == 0,
    lambda i, j: (i + j) % 3 == 0,
    lambda i, j: (i // 2 + j // 3) % 2 == 0,
    lambda i, j: (i * j) % 2 + (i * j) % 3 == 0,
    lambda i, j: ((i * j) % 2 + (i * j) % 3) % 2 == 0,
    lambda i, j: ((i + j) % 2 + (i * j) % 3) % 2 == 0,
)

def mask_function(mask_pattern):
    if mask_pattern not in range(len(MASK_FUNCTIONS)):
        raise ValueError(f"Invalid mask pattern {mask_pattern}")
    return MASK_FUNCTIONS[mask_pattern]

def lost_calculator(modules):
    '''
    Scoring penalty points for each orrcurence of defined features
    See in 8.8.2 and Table 24
    '''
    modules_cnt = len(modules)

    return (lost_count_1(modules, modules_cnt) + lost_count_2(modules, modules_cnt)
            + lost_count_3(modules, modules_cnt) + lost_count_4(modules, modules_cnt))

def _run_points(line):
    points = 0
    previous_color = line[0]
    i = 1
    for color in line[1:]:
        if color == previous_color:
            i += 1
        else:
            if i >= 5:
                points += constants.MASK_EVAL_N1 + i - 5
            i = 1
            previous_color = color
    if i >= 5:
        points += constants.MASK_EVAL_N1 + i - 5
    return points

def lost_count_1(modules, modules_cnt):
    '''
    Adjacent modules in row/column in same color
    No. of modules = (5 + i) -> Points = N1 + i
    '''
    points = 0

    for r in range(modules_cnt):
        points += _run_points(modules[r])

    for c in range(modules_cnt):
        points += _run_points([modules[r][c] for r in range(modules_cnt)])

    return points

def lost_count_2(modules, modules_cnt):
    '''
    2*2 block of modules in same color -> N2 each
    '''
    points = 0

    for r in range(modules_cnt - 1):
        row = modules[r]
        next_row = modules[r + 1]
        for c in range(modules_cnt - 1):
            color = row[c]
            if row[c + 1] == color and next_row[c] == color and next_row[c + 1] == color:
                points += constants.MASK_EVAL_N2
    return points

_FINDER_LIKE = (True, False, True, True, True, False, True)

def lost_count_3(modules, modules_cnt):
    '''
    1:1:3:1:1 (dark:light:dark:light:dark) in row/column -> N3 each
    '''
    points = 0

    for r in range(modules_cnt):
        row = modules[r]
        for c in range(modules_cnt - 6):
            if tuple(bool(m) for m in row[c:c + 7]) == _FINDER_LIKE:
                points += constants.MASK_EVAL_N3

    for c in range(modules_cnt):
        col = [bool(modules[r][c]) for r in range(modules_cnt)]
        for r in range(modules_cnt - 6):
            if tuple(col[r:r + 7]) == _FINDER_LIKE:
                points += constants.MASK_EVAL_N3

    return points

def lost_count_4(modules, modules_cnt):
    '''
    Proportion of dark in the entire mat
    every 5% away from 50% -> N4
    '''
    dark_cnt = sum(map(sum, modules))
    percent = dark_cnt / modules_cnt / modules_cnt * 100
    return constants.MASK_EVAL_N4 * abs(percent - 50) / 5
