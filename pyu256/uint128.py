#!/usr/bin/env python
# -*- coding: utf-8 -*-

import numpy as np

from pyu256.base import DIGITS, check_base, pad_digits

NUM_BITS = 128
MASK = (2 ** NUM_BITS) - 1  # 0xFFF... or 0b111...
HALF_BITS = 64
HALF_MASK = (2 ** HALF_BITS) - 1


def _coerce(o):
    '''
    Promote a native integer (Python or numpy) to a limb, passing limbs
    through. Returns None for anything else, so the caller can hand back
    NotImplemented.
    '''
    if isinstance(o, Uint128):
        return o
    if isinstance(o, (int, np.integer, np.bool_)):
        return Uint128(o)
    return None


def _exact(o):
    '''
    Exact integer value of a comparison operand, or None for unknown types.
    '''
    if isinstance(o, Uint128):
        return o.num
    if isinstance(o, (int, np.integer, np.bool_)):
        return int(o)
    return None


class Uint128:
    '''
    Fixed-width 128-bit unsigned integer, the half-width "limb" that two of
    are composed into a 256-bit integer. Every operation explicitly under- or
    over-flows modulo 2 ** 128.
    '''

    __slots__ = ('num',)

    # numpy scalars on the left of an operator defer to our reflected dunders
    __array_ufunc__ = None

    def __init__(self, num=0):
        '''
        Initialize with anything that can be converted to an integer with the
        top-level int() call. Values outside of the 128-bit range are reduced
        modulo 2 ** 128, so a negative value becomes its two's complement.
        :param num: Integer value
        '''
        self.num = int(num) & MASK

    @classmethod
    def from_halves(cls, upper, lower):
        '''
        Compose a limb from its upper and lower 64-bit halves, each truncated
        to 64 bits first.
        '''
        return cls(((int(upper) & HALF_MASK) << HALF_BITS) | (int(lower) & HALF_MASK))

    def split(self):
        '''
        The upper and lower 64-bit halves of this limb, as limbs.
        '''
        return Uint128(self.num >> HALF_BITS), Uint128(self.num & HALF_MASK)

    def __repr__(self):
        return f"uint128({self.num})"

    def __str__(self):
        return self.str()

    def __format__(self, *fmt_args):
        '''
        Format like the underlying Python int(), with the full format mini-language.
        '''
        return self.num.__format__(*fmt_args)

    def __int__(self): return self.num
    def __index__(self): return self.num
    def __bool__(self): return self.num != 0
    def __hash__(self): return hash(self.num)

    '''
    Comparisons against native integers are exact, without the reduction
    modulo 2 ** 128 that arithmetic operands get, so a limb never equals a
    negative int and equal values always hash alike.
    '''
    def __eq__(self, o):
        num = _exact(o)
        return NotImplemented if num is None else self.num == num

    def __ne__(self, o):
        num = _exact(o)
        return NotImplemented if num is None else self.num != num

    def __lt__(self, o):
        num = _exact(o)
        return NotImplemented if num is None else self.num < num

    def __le__(self, o):
        num = _exact(o)
        return NotImplemented if num is None else self.num <= num

    def __gt__(self, o):
        num = _exact(o)
        return NotImplemented if num is None else self.num > num

    def __ge__(self, o):
        num = _exact(o)
        return NotImplemented if num is None else self.num >= num

    def __add__(self, o):
        o = _coerce(o)
        if o is None:
            return NotImplemented
        return Uint128(self.num + o.num)

    __radd__ = __add__

    def __sub__(self, o):
        o = _coerce(o)
        if o is None:
            return NotImplemented
        return Uint128(self.num - o.num)

    def __rsub__(self, o):
        o = _coerce(o)
        if o is None:
            return NotImplemented
        return Uint128(o.num - self.num)

    def __mul__(self, o):
        o = _coerce(o)
        if o is None:
            return NotImplemented
        return Uint128(self.num * o.num)

    __rmul__ = __mul__

    def mul_wide(self, o):
        '''
        Full double-width product of two limbs, split into its upper and lower
        128 bits.
        '''
        o = _coerce(o)
        if o is None:
            raise TypeError("mul_wide() needs a Uint128 or a native integer")
        product = self.num * o.num
        return Uint128(product >> NUM_BITS), Uint128(product)

    def __and__(self, o):
        o = _coerce(o)
        if o is None:
            return NotImplemented
        return Uint128(self.num & o.num)

    __rand__ = __and__

    def __or__(self, o):
        o = _coerce(o)
        if o is None:
            return NotImplemented
        return Uint128(self.num | o.num)

    __ror__ = __or__

    def __xor__(self, o):
        o = _coerce(o)
        if o is None:
            return NotImplemented
        return Uint128(self.num ^ o.num)

    __rxor__ = __xor__

    def __invert__(self):
        return Uint128(~self.num)

    def __lshift__(self, shift):
        '''
        Shift left by a native count. Counts of 128 or more push every bit out.
        '''
        shift = int(shift)
        if shift < 0:
            raise ValueError(f"Negative shift count {shift}")
        if shift >= NUM_BITS:
            return Uint128(0)
        return Uint128(self.num << shift)

    def __rshift__(self, shift):
        shift = int(shift)
        if shift < 0:
            raise ValueError(f"Negative shift count {shift}")
        if shift >= NUM_BITS:
            return Uint128(0)
        return Uint128(self.num >> shift)

    def bits(self):
        '''
        Position of the highest set bit plus one, 0 for a zero limb.
        '''
        return self.num.bit_length()

    def export_bits(self):
        '''
        The 16 bytes of this limb, most significant first.
        '''
        return self.num.to_bytes(NUM_BITS // 8, 'big')

    def str(self, base=10, min_length=0):
        '''
        Digits of this limb in a base from 2 to 36, left-padded with zeros to
        at least min_length characters.
        '''
        base = check_base(base)
        num, digits = self.num, []
        while num:
            num, digit = divmod(num, base)
            digits.append(DIGITS[digit])
        return pad_digits(''.join(reversed(digits)) or '0', min_length)
