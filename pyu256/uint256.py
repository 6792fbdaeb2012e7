#!/usr/bin/env python
# -*- coding: utf-8 -*-

import logging

import numpy as np

from pyu256.base import check_base, chunk_len, decode_digit, out_of_range, pad_digits
from pyu256.errors import DivisionByZero, InvalidCharacter
from pyu256.uint128 import Uint128
import pyu256.uint128 as uint128

NUM_BITS = 256
LIMB_BITS = uint128.NUM_BITS
NUM_BYTES = NUM_BITS // 8


def _limb(o):
    '''
    One half of a 256-bit integer, from a limb or a native integer.
    '''
    if isinstance(o, Uint128):
        return o
    if isinstance(o, (int, np.integer, np.bool_)):
        return Uint128(o)
    raise TypeError(f"Cannot use {type(o).__name__} as a 128-bit limb")


def _coerce(o):
    '''
    Promote the other operand of a binary operator to the full width. Returns
    None for types we do not know, so the operator can hand back NotImplemented.
    '''
    if isinstance(o, Uint256):
        return o
    if isinstance(o, (Uint128, int, np.integer, np.bool_)):
        return Uint256(o)
    return None


def _coerce_narrow(o):
    '''
    Promote the other operand of a bitwise operator. A negative native integer
    only fills the lower limb with ones, leaving the upper limb 0, so AND clears
    the upper limb while OR and XOR leave it alone.
    '''
    if out_of_range(o, NUM_BITS) < 0:
        return Uint256._from_limbs(Uint128(0), Uint128(o))
    return _coerce(o)


class Uint256:
    '''
    Fixed-width 256-bit unsigned integers, integers that explicitly under- or
    over-flow modulo 2 ** 256. The value is held as two 128-bit limbs,

        value = upper * 2 ** 128 + lower

    and every operator is carried out limb-wise, moving carries, borrows and
    shifted bits across the boundary between the two halves explicitly.

    Values are immutable, so compound assignments like `x += 1` rebind `x` to a
    fresh result and the shared constants can be handed out freely.
    '''

    __slots__ = ('_upper', '_lower')

    # numpy scalars on the left of an operator defer to our reflected dunders
    __array_ufunc__ = None

    def __init__(self, *args):
        '''
        Initialize the class from one of the following argument shapes:
            Uint256()                     zero
            Uint256(num)                  Python or numpy integer, bool, Uint128 or Uint256
            Uint256(text, base)           digits in a base from 2 to 36
            Uint256(upper, lower)         two 128-bit halves
            Uint256(uh, ul, lh, ll)       four 64-bit quarters, most significant first
        Native integers are reduced modulo 2 ** 256, so a negative one becomes
        its two's complement with the upper limb all ones.
        '''
        if len(args) == 0:
            upper, lower = Uint128(0), Uint128(0)
        elif len(args) == 1:
            upper, lower = self._split_num(args[0])
        elif len(args) == 2 and isinstance(args[0], str):
            parsed = Uint256.from_str(*args)
            upper, lower = parsed._upper, parsed._lower
        elif len(args) == 2:
            upper, lower = _limb(args[0]), _limb(args[1])
        elif len(args) == 4:
            upper = Uint128.from_halves(args[0], args[1])
            lower = Uint128.from_halves(args[2], args[3])
        else:
            raise TypeError(f"Uint256() takes 0, 1, 2 or 4 arguments ({len(args)} given)")
        self._upper = upper
        self._lower = lower

    @staticmethod
    def _split_num(num):
        if isinstance(num, Uint256):
            return num._upper, num._lower
        if isinstance(num, Uint128):
            return Uint128(0), num
        if isinstance(num, str):
            parsed = Uint256.from_str(num)
            return parsed._upper, parsed._lower
        if isinstance(num, (int, np.integer, np.bool_)):
            int_num = int(num)
            # arithmetic shift keeps the sign, so negatives fill the upper limb with ones
            return Uint128(int_num >> LIMB_BITS), Uint128(int_num)
        raise TypeError(f"Cannot construct Uint256 from {type(num).__name__}")

    @classmethod
    def _from_limbs(cls, upper, lower):
        # both halves are already limbs, so skip the argument dispatch
        value = object.__new__(cls)
        value._upper = upper
        value._lower = lower
        return value

    @classmethod
    def from_halves(cls, upper, lower):
        return cls(upper, lower)

    @classmethod
    def from_quarters(cls, upper_high, upper_low, lower_high, lower_low):
        return cls(upper_high, upper_low, lower_high, lower_low)

    @classmethod
    def from_str(cls, s, base=10):
        '''
        Parse digits in a base from 2 to 36, most significant first. Letters
        are case-insensitive. The empty string is zero, and anything beyond
        256 bits wraps around.
        :param s: Digit string, without prefix, sign or separators
        :param base: Numeric base of the digits
        '''
        base = check_base(base)
        value = cls(0)
        for pos, ch in enumerate(s):
            digit = decode_digit(ch)
            if digit is None or digit >= base:
                logging.debug(f"Rejecting {ch!r} at position {pos} of {s!r} for base {base}.")
                raise InvalidCharacter(ch, pos, base)
            value = value * base + digit
        return value

    @classmethod
    def from_bytes(cls, data):
        '''
        Import a big-endian byte string of at most 32 bytes, the inverse of
        export_bits() and export_bits_truncate().
        '''
        data = bytes(data)
        if len(data) > NUM_BYTES:
            raise ValueError(f"Cannot import {len(data)} bytes into a {NUM_BYTES}-byte integer")
        data = data.rjust(NUM_BYTES, b'\x00')
        half = NUM_BYTES // 2
        return cls(int.from_bytes(data[:half], 'big'), int.from_bytes(data[half:], 'big'))

    @classmethod
    def zero(cls):
        return UINT256_0

    @classmethod
    def one(cls):
        return UINT256_1

    @classmethod
    def max(cls):
        return UINT256_MAX

    @property
    def upper(self):
        return self._upper

    @property
    def lower(self):
        return self._lower

    def __repr__(self):
        return f"uint256({self.str()})"

    def __str__(self):
        return self.str()

    def __format__(self, *fmt_args):
        '''
        Format like the underlying Python int(), with the full format mini-language.
        '''
        return int(self).__format__(*fmt_args)

    def __int__(self):
        return (int(self._upper) << LIMB_BITS) | int(self._lower)

    __index__ = __int__

    def __hash__(self):
        return hash(int(self))

    def __bool__(self):
        return bool(self._upper) or bool(self._lower)

    def astype(self, dtype):
        '''
        Narrow to a numpy integer scalar, keeping only the low bits of the
        lower limb. Signed dtypes reinterpret those bits, and a bool dtype is
        simply whether the value is non-zero.
        '''
        dtype = np.dtype(dtype)
        if dtype.kind == 'b':
            return np.bool_(bool(self))
        if dtype.kind not in 'iu':
            raise TypeError(f"Cannot narrow Uint256 to {dtype}")
        low = int(self._lower) & ((1 << (8 * dtype.itemsize)) - 1)
        return np.array(low, dtype=np.uint64).astype(dtype)[()]

    '''
    Comparisons are lexicographic over the (upper, lower) pair, with everything
    other than < and == derived from those two. A native integer outside of
    [0, 2 ** 256) is never equal, sorting below or above every value, so equal
    values always hash alike.
    '''
    def __eq__(self, o):
        if out_of_range(o, NUM_BITS):
            return False
        o = _coerce(o)
        if o is None:
            return NotImplemented
        return self._upper == o._upper and self._lower == o._lower

    def __lt__(self, o):
        side = out_of_range(o, NUM_BITS)
        if side:
            return side > 0
        o = _coerce(o)
        if o is None:
            return NotImplemented
        if self._upper == o._upper:
            return self._lower < o._lower
        return self._upper < o._upper

    def __ne__(self, o):
        eq = self.__eq__(o)
        return eq if eq is NotImplemented else not eq

    def __gt__(self, o):
        side = out_of_range(o, NUM_BITS)
        if side:
            return side < 0
        o = _coerce(o)
        return NotImplemented if o is None else o < self

    def __le__(self, o):
        side = out_of_range(o, NUM_BITS)
        if side:
            return side > 0
        o = _coerce(o)
        return NotImplemented if o is None else not o < self

    def __ge__(self, o):
        side = out_of_range(o, NUM_BITS)
        if side:
            return side < 0
        o = _coerce(o)
        return NotImplemented if o is None else not self < o

    def __and__(self, o):
        o = _coerce_narrow(o)
        if o is None:
            return NotImplemented
        return Uint256._from_limbs(self._upper & o._upper, self._lower & o._lower)

    __rand__ = __and__

    def __or__(self, o):
        o = _coerce_narrow(o)
        if o is None:
            return NotImplemented
        return Uint256._from_limbs(self._upper | o._upper, self._lower | o._lower)

    __ror__ = __or__

    def __xor__(self, o):
        o = _coerce_narrow(o)
        if o is None:
            return NotImplemented
        return Uint256._from_limbs(self._upper ^ o._upper, self._lower ^ o._lower)

    __rxor__ = __xor__

    def __invert__(self):
        return Uint256._from_limbs(~self._upper, ~self._lower)

    def _shift_count(self):
        '''
        This value as a native shift count, or None when it is 256 or more and
        every bit would be shifted out.
        '''
        if self._upper or self._lower >= NUM_BITS:
            return None
        return int(self._lower)

    def __lshift__(self, shift):
        shift = _coerce(shift)
        if shift is None:
            return NotImplemented
        s = shift._shift_count()
        if s is None:
            return UINT256_0
        elif s == 0:
            return self
        elif s == LIMB_BITS:
            return Uint256._from_limbs(self._lower, Uint128(0))
        elif s < LIMB_BITS:
            carried = self._lower >> (LIMB_BITS - s)
            return Uint256._from_limbs((self._upper << s) | carried, self._lower << s)
        return Uint256._from_limbs(self._lower << (s - LIMB_BITS), Uint128(0))

    def __rlshift__(self, o):
        o = _coerce(o)
        return NotImplemented if o is None else o << self

    def __rshift__(self, shift):
        shift = _coerce(shift)
        if shift is None:
            return NotImplemented
        s = shift._shift_count()
        if s is None:
            return UINT256_0
        elif s == 0:
            return self
        elif s == LIMB_BITS:
            return Uint256._from_limbs(Uint128(0), self._upper)
        elif s < LIMB_BITS:
            carried = self._upper << (LIMB_BITS - s)
            return Uint256._from_limbs(self._upper >> s, carried | (self._lower >> s))
        return Uint256._from_limbs(Uint128(0), self._upper >> (s - LIMB_BITS))

    def __rrshift__(self, o):
        o = _coerce(o)
        return NotImplemented if o is None else o >> self

    def __add__(self, o):
        o = _coerce(o)
        if o is None:
            return NotImplemented
        lower = self._lower + o._lower
        carry = 1 if lower < self._lower else 0
        return Uint256._from_limbs(self._upper + o._upper + carry, lower)

    __radd__ = __add__

    def __sub__(self, o):
        o = _coerce(o)
        if o is None:
            return NotImplemented
        borrow = 1 if self._lower < o._lower else 0
        return Uint256._from_limbs(self._upper - o._upper - borrow, self._lower - o._lower)

    def __rsub__(self, o):
        o = _coerce(o)
        return NotImplemented if o is None else -(self - o)

    def __pos__(self):
        return self

    def __neg__(self):
        '''
        Two's complement, i.e. 0 - self.
        '''
        return UINT256_0 - self

    def _quarters(self):
        '''
        The four 64-bit quarter limbs, least significant first.
        '''
        upper_high, upper_low = self._upper.split()
        lower_high, lower_low = self._lower.split()
        return [lower_low, lower_high, upper_low, upper_high]

    def __mul__(self, o):
        '''
        Schoolbook multiplication over 64-bit quarters, keeping the low 256
        bits. Each 64 x 64 partial product fits a limb exactly, and a column
        accumulates at most eight 64-bit terms, so a limb holds it with room
        to spare before the carries are pushed up.
        '''
        o = _coerce(o)
        if o is None:
            return NotImplemented
        lhs, rhs = self._quarters(), o._quarters()
        columns = [Uint128(0)] * 4
        for i, lhs_quarter in enumerate(lhs):
            # partial products landing entirely above bit 255 are dropped
            for j, rhs_quarter in enumerate(rhs[:4 - i]):
                high, low = (lhs_quarter * rhs_quarter).split()
                columns[i + j] += low
                if i + j + 1 < 4:
                    columns[i + j + 1] += high

        words, carry = [], Uint128(0)
        for column in columns:
            carry, word = (column + carry).split()
            words.append(word)
        return Uint256.from_quarters(*reversed(words))

    __rmul__ = __mul__

    def _bit(self, i):
        limb = self._upper if i >= LIMB_BITS else self._lower
        return (limb >> (i % LIMB_BITS)) & 1

    def _divmod(self, o):
        '''
        Binary long division, one dividend bit at a time from the top.
        '''
        if not o:
            logging.debug(f"Dividing 0x{self:x} by zero.")
            raise DivisionByZero('Uint256 division or modulo by zero')
        if o > self:
            return UINT256_0, self
        elif o == self:
            return UINT256_1, UINT256_0

        quotient, remainder = UINT256_0, UINT256_0
        for i in reversed(range(self.bits())):
            # never wraps, the remainder is at most the dividend bits seen so far
            remainder = (remainder << 1) | self._bit(i)
            if remainder >= o:
                remainder = remainder - o
                quotient = quotient | (UINT256_1 << i)
        return quotient, remainder

    def __divmod__(self, o):
        o = _coerce(o)
        return NotImplemented if o is None else self._divmod(o)

    def __rdivmod__(self, o):
        o = _coerce(o)
        return NotImplemented if o is None else o._divmod(self)

    def __floordiv__(self, o):
        o = _coerce(o)
        return NotImplemented if o is None else self._divmod(o)[0]

    def __rfloordiv__(self, o):
        o = _coerce(o)
        return NotImplemented if o is None else o._divmod(self)[0]

    # `/` is integer division too, like the other fixed-width integer classes
    __truediv__ = __floordiv__
    __rtruediv__ = __rfloordiv__

    def __mod__(self, o):
        o = _coerce(o)
        return NotImplemented if o is None else self._divmod(o)[1]

    def __rmod__(self, o):
        o = _coerce(o)
        return NotImplemented if o is None else o._divmod(self)[1]

    def bits(self):
        '''
        Position of the highest set bit plus one, 0 for zero.
        '''
        if self._upper:
            return LIMB_BITS + self._upper.bits()
        return self._lower.bits()

    def str(self, base=10, min_length=0):
        '''
        Digits of this value in a base from 2 to 36, lowercase, left-padded
        with zeros to at least min_length characters.
        :param base: Numeric base of the digits
        :param min_length: Minimum number of characters in the result
        '''
        base = check_base(base)
        if not self:
            return pad_digits('0', min_length)

        # peel off as many digits per division as fit in a 64-bit chunk
        length = chunk_len(base)
        num, divisor, chunks = self, Uint256(base ** length), []
        while num:
            num, chunk = num._divmod(divisor)
            chunks.append(chunk.lower)

        digits = chunks.pop().str(base)
        for chunk in reversed(chunks):
            digits += chunk.str(base, length)
        return pad_digits(digits, min_length)

    def export_bits(self):
        '''
        All 32 bytes of the value, big-endian: the upper limb, then the lower.
        '''
        return self._upper.export_bits() + self._lower.export_bits()

    def export_bits_truncate(self):
        '''
        Minimal big-endian bytes of the value, with leading zero bytes dropped.
        Zero exports as the empty byte string.
        '''
        return self.export_bits().lstrip(b'\x00')


UINT256_0 = Uint256(0)
UINT256_1 = Uint256(1)
UINT256_MAX = Uint256(-1)
