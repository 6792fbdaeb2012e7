#!/usr/bin/env python
# -*- coding: utf-8 -*-

import numpy as np

'''
Stateless functions that are used by both the 128-bit limb and the 256-bit
integer classes, for converting to and from text and for comparing against
native integers.
'''

MIN_BASE, MAX_BASE = 2, 36

DIGITS = '0123456789abcdefghijklmnopqrstuvwxyz'


def check_base(base):
    '''
    Validate a numeric base for string conversion, returning it as a plain
    integer.
    '''
    int_base = int(base)
    if not MIN_BASE <= int_base <= MAX_BASE:
        raise ValueError(f"Base must be in the range [{MIN_BASE}, {MAX_BASE}], got {base}")
    return int_base


def decode_digit(ch):
    '''
    Value of a single alphanumeric digit, with letters case-insensitive
    from 10 to 35. Returns None for anything else.
    '''
    if '0' <= ch <= '9':
        return ord(ch) - ord('0')
    elif 'a' <= ch <= 'z':
        return ord(ch) - ord('a') + 10
    elif 'A' <= ch <= 'Z':
        return ord(ch) - ord('A') + 10
    return None


def pad_digits(digits, min_length):
    '''
    Left-pad a digit string with zeros out to a minimum length.
    '''
    return digits.rjust(int(min_length), '0')


def out_of_range(o, num_bits):
    '''
    Where a native integer operand falls relative to the unsigned range of a
    width: -1 below zero, 1 above the largest value, 0 within it or when the
    operand is not a native integer at all. Comparisons use this to stay exact,
    so equal values always hash alike.
    '''
    if isinstance(o, (int, np.integer, np.bool_)):
        num = int(o)
        if num < 0:
            return -1
        elif num >> num_bits:
            return 1
    return 0


def chunk_len(base, num_bits=64):
    '''
    Largest number of digits in a base whose place value still fits in
    num_bits, used to format long values a chunk of digits at a time.
    '''
    length = 1
    while base ** (length + 1) >> num_bits == 0:
        length += 1
    return length
