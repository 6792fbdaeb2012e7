#!/usr/bin/env python
# -*- coding: utf-8 -*-


class InvalidCharacter(ValueError):
    '''
    A character in a string being parsed is not a digit of the requested base.
    '''

    def __init__(self, ch, pos, base):
        super().__init__(f"Invalid character {ch!r} at position {pos} for base {base}")
        self.ch = ch
        self.pos = pos
        self.base = base


class DivisionByZero(ZeroDivisionError):
    '''
    Division or modulo by zero.
    '''
    pass
