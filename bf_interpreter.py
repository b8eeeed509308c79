import sys

TAPE_SIZE = 30000
POINTER_BITS = 64

OPEN = ord('[')
CLOSE = ord(']')


class InterpreterFault(IndexError):
    """Raised when a malformed program indexes outside the tape or the program."""


class TapeFault(InterpreterFault):
    def __init__(self, pointer, size):
        super().__init__(f"data pointer {pointer} out of range for tape of {size} cells")
        self.pointer = pointer
        self.size = size


class ProgramFault(InterpreterFault):
    def __init__(self, pc, length):
        super().__init__(f"program counter {pc} out of range for program of {length} bytes")
        self.pc = pc
        self.length = length


class BracketError(ValueError):
    def __init__(self, message, position):
        super().__init__(f"{message} at {position}")
        self.position = position


def check_brackets(code):
    """
    Optional pre-flight pass: raise BracketError on the first unbalanced bracket.
    Positions are indices into `code` as given (no sentinel).
    """
    if isinstance(code, str):
        code = code.encode('utf-8')
    loop_stack = []
    for i, c in enumerate(code):
        if c == OPEN:
            loop_stack.append(i)
        elif c == CLOSE:
            if not loop_stack:
                raise BracketError("unmatched ']'", i)
            loop_stack.pop()
    if loop_stack:
        raise BracketError("unmatched '['", loop_stack[-1])


class Tape:
    """Fixed-size byte cells plus the data pointer `d`."""

    def __init__(self, size=TAPE_SIZE, pointer_bits=POINTER_BITS):
        self.cells = bytearray(size)
        self.size = size
        self.d = 0
        # pointer arithmetic wraps at the pointer width, not at the tape size
        self.mask = (1 << pointer_bits) - 1

    def read(self):
        if self.d >= self.size:
            raise TapeFault(self.d, self.size)
        return self.cells[self.d]

    def write(self, value):
        if self.d >= self.size:
            raise TapeFault(self.d, self.size)
        self.cells[self.d] = value


class Interpreter:
    """
    Single-step interpreter.

    The driver calls `load` once and then `eval` until `exit` is true.
    Brackets are matched by scanning the program on every `[`/`]`; nothing
    about their balance is checked ahead of time.
    """

    def __init__(self, tape_size=TAPE_SIZE, pointer_bits=POINTER_BITS, stdin=None, stdout=None):
        self.tape = Tape(tape_size, pointer_bits)
        # leading 0 is a no-op sentinel, pc starts on it
        self.prog = bytearray(b'\x00')
        self.pc = 0
        self.exit = False
        self.steps = 0
        self.stdin = stdin
        self.stdout = stdout

        self.dispatch = {
            ord('>'): self.inc_pos,
            ord('<'): self.dec_pos,
            ord('+'): self.inc_data,
            ord('-'): self.dec_data,
            ord('.'): self.out_char,
            ord(','): self.in_char,
            OPEN: self.open,
            CLOSE: self.close,
        }

    @property
    def program(self):
        return bytes(self.prog)

    def load(self, code):
        if isinstance(code, str):
            code = code.encode('utf-8')
        self.prog.extend(code)

    def eval(self):
        if self.exit:
            return
        handler = self.dispatch.get(self.prog[self.pc])
        if handler is not None:
            handler()
        self.pc += 1
        self.steps += 1

        if self.pc >= len(self.prog):
            self.exit = True

    def inc_pos(self):
        self.tape.d = (self.tape.d + 1) & self.tape.mask

    def dec_pos(self):
        self.tape.d = (self.tape.d - 1) & self.tape.mask

    def inc_data(self):
        self.tape.write((self.tape.read() + 1) % 256)

    def dec_data(self):
        self.tape.write((self.tape.read() - 1) % 256)

    def out_char(self):
        out = self.stdout if self.stdout is not None else sys.stdout.buffer
        # a byte is emitted as the UTF-8 encoding of the matching code point
        out.write(chr(self.tape.read()).encode("utf-8"))
        out.flush()

    def in_char(self):
        src = self.stdin if self.stdin is not None else sys.stdin.buffer
        data = src.read(1)
        # EOF leaves the cell as it was
        if data:
            self.tape.write(data[0])

    def fetch(self, pc):
        if pc < 0 or pc >= len(self.prog):
            raise ProgramFault(pc, len(self.prog))
        return self.prog[pc]

    def open(self):
        if self.tape.read() != 0:
            return
        balance = 1
        while balance != 0:
            self.pc += 1
            c = self.fetch(self.pc)
            if c == OPEN:
                balance += 1
            elif c == CLOSE:
                balance -= 1
        # pc is on the matching ']'; eval steps past it

    def close(self):
        balance = 0
        while True:
            c = self.fetch(self.pc)
            if c == CLOSE:
                balance += 1
            elif c == OPEN:
                balance -= 1
            if self.pc == 0:
                raise ProgramFault(-1, len(self.prog))
            self.pc -= 1
            if balance == 0:
                break
        # pc is one before the matching '['; eval lands on it and re-tests
