# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

from typing import Optional


class CardError(Exception):
    """Base class for errors surfaced by the card core."""


class NotFound(CardError):
    pass


class Forbidden(CardError):
    pass


class InvalidAttributes(CardError):
    pass


class MalformedDocument(CardError):
    """A design document payload could not be parsed.

    `index` is the position of the offending scene object, when the problem
    is local to one object.
    """

    def __init__(self, message: str, index: Optional[int] = None):
        if index is not None:
            message = f"object {index}: {message}"
        super().__init__(message)
        self.index = index


class UnsupportedVersion(CardError):
    def __init__(self, version: str):
        super().__init__(f"Unsupported design document version: {version}")
        self.version = version


class StorageError(CardError):
    pass


class Conflict(CardError):
    # Reserved for version-checked updates; cards currently use last-write-wins.
    pass


class QuotaExceeded(CardError):
    pass


class AIServiceError(CardError):
    pass
