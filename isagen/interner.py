################################################################################
#
# @file     interner.py
# @brief    This file is part of the ISAGEN instruction model module.
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

import itertools
from collections import OrderedDict

from isagen import names

class RequestTable:
    """Gives structurally equal keys (shared routines, unordered write
    lists) one dense id, in order of first request, and remembers every
    consumer which requested them so that the parameters of the emitted
    routine can later be propagated to all of its users."""
    def __init__(self):
        self.entries = OrderedDict()
        self.keys = []

    def request(self, key, consumer):
        if not key in self.entries:
            self.entries[key] = (len(self.entries), [])
            self.keys.append(key)
        keyId, consumers = self.entries[key]
        consumers.append(consumer)
        return keyId

    def getId(self, key):
        return self.entries[key][0]

    def consumers(self, key):
        return self.entries[key][1]

    def keyAt(self, keyId):
        return self.keys[keyId]

    def __contains__(self, key):
        return key in self.entries

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        for key, (keyId, consumers) in self.entries.items():
            yield key, keyId, consumers

class PermutationTables:
    """Lazily computed tables of all the orderings of n items"""
    def __init__(self):
        self.tables = OrderedDict()

    def table(self, n):
        if not n in self.tables:
            self.tables[n] = list(itertools.permutations(range(n)))
        return self.tables[n]

    def request(self, n):
        return names.permutationTableVarName(n), len(self.table(n))

    def __iter__(self):
        return iter(self.tables.items())

    def __len__(self):
        return len(self.tables)
