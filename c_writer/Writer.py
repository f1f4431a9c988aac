################################################################################
#
# @file     Writer.py
# @brief    This file is part of the ISAGEN C code generator module.
# @details
# @copyright
#
# This file is part of ISAGEN.
#
# ISAGEN is free software; you can redistribute it and/or modify
# it under the terms of the GNU Lesser General Public License as
# published by the Free Software Foundation; either version 3 of the
# License, or (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this program; if not, write to the
# Free Software Foundation, Inc.,
# 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301  USA
# or see <http://www.gnu.org/licenses/>.
#
################################################################################

import io

def isBreak(text, pos, char):
    # A quoted character, as in ' ', is not a break point.
    return pos < len(text) and text[pos] == char and text[pos - 1] != "'"

def findBreak(text, width, split, start):
    """Returns the position where text is broken so that its first piece
    fits width: the split character closest to width, looking back at most
    8 characters, else the first one past width. Whitespace is tried after
    split. -1 means that no break point exists after start."""
    chars = [split]
    if split != ' ':
        chars.append(' ')
    for char in chars:
        for pos in range(width, max(width - 8, start), -1):
            if isBreak(text, pos, char):
                return pos
    for char in chars:
        for pos in range(max(width + 1, start + 1), len(text)):
            if isBreak(text, pos, char):
                return pos
    return -1

class StringWriter:
    """Collects the written code without any formatting."""
    def __init__(self):
        self.code = ''

    def write(self, code, split = ' ', prefix = ''):
        self.code += code

    def __str__(self):
        return self.code

class CodeWriter:
    """Writes C code on a file. Lines are re-indented by brace nesting and
    the ones longer than lineWidth are wrapped."""

    def __init__(self, file, indentSize = 2, lineWidth = 80):
        if isinstance(file, str):
            self.file = open(file, 'at')
            self.opened = True
        else:
            file.flush()
            self.file = file
            self.opened = False
        if lineWidth < 20:
            raise ValueError('Specify a minimum line length of at least 20 characters.')
        self.curIndent = 0
        self.indentSize = indentSize
        self.lineWidth = lineWidth
        self.codeBuffer = ''

    def __del__(self):
        self.close()

    def close(self):
        if self.opened:
            self.file.close()
            self.opened = False

    def write(self, code, split = ' ', prefix = ''):
        """Only complete lines are written, the rest stays in the buffer.
        split is the preferred break character for long lines; prefix is
        put in front of every line but the first one of code."""
        self.codeBuffer += code.expandtabs(self.indentSize)
        lines = self.codeBuffer.split('\n')
        self.codeBuffer = lines.pop()
        for lineNum, line in enumerate(lines):
            line = line.strip()
            if self.curIndent > 0 and (line.startswith('}') or line.endswith('}')):
                self.curIndent -= 1
            if not line:
                self.file.write('\n')
                continue
            if lineNum > 0 and prefix:
                line = prefix + line
            # Preprocessor directives stay in the first column.
            if line.startswith('#'):
                margin = ''
            else:
                margin = ' ' * (self.curIndent * self.indentSize)
            for piece in self.wrapLine(margin, line, split, prefix):
                self.file.write(piece + '\n')
            if line.endswith('{'):
                self.curIndent += 1

    def wrapLine(self, margin, line, split = ' ', prefix = ''):
        """Breaks margin + line into the list of the lines to be written.
        Continuation lines get one more indentation level, or repeat the
        comment leader."""
        if prefix:
            nextMargin = margin + prefix
        elif line.startswith('//'):
            nextMargin = margin + '// '
        elif line.startswith('/**'):
            nextMargin = margin + ' *  '
        else:
            nextMargin = margin + ' ' * self.indentSize
        text = margin + line
        if len(nextMargin) >= self.lineWidth:
            return [text]

        pieces = []
        inString = False
        start = len(margin)
        while len(text) > self.lineWidth:
            pos = findBreak(text, self.lineWidth, split, start)
            if pos < 0:
                break
            head = text[:pos]
            if text[pos] != ' ':
                head += text[pos]
            if head.count('"') % 2 == 1:
                inString = not inString
            if line.startswith('#'):
                head += ' \\'
            elif inString:
                head += '\\'
            pieces.append(head)
            text = nextMargin + text[pos + 1:].strip()
            start = len(nextMargin)
        pieces.append(text)
        return pieces

    def flush(self):
        self.file.write(self.codeBuffer)
        self.codeBuffer = ''
        self.file.flush()

def renderElements(elements, indentSize = 2, lineWidth = 80, implementation = True):
    """Writes the given elements on a memory buffer and returns the resulting
    text. Used to produce the named blocks handed to the file templates."""
    buf = io.StringIO()
    writer = CodeWriter(buf, indentSize = indentSize, lineWidth = lineWidth)
    for element in elements:
        if implementation:
            element.writeImplementation(writer)
        else:
            element.writeDeclaration(writer)
    writer.flush()
    return buf.getvalue()
