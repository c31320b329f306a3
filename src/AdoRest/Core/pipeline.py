# === NAVMAP v1 ===
# {
#   "module": "AdoRest.Core.pipeline",
#   "purpose": "Chain-of-responsibility request pipeline.",
#   "sections": [
#     {
#       "id": "policy",
#       "name": "Policy",
#       "anchor": "class-policy",
#       "kind": "class"
#     },
#     {
#       "id": "nextpolicy",
#       "name": "NextPolicy",
#       "anchor": "class-nextpolicy",
#       "kind": "class"
#     },
#     {
#       "id": "pipeline",
#       "name": "Pipeline",
#       "anchor": "class-pipeline",
#       "kind": "class"
#     }
#   ]
# }
# === /NAVMAP ===

"""Chain-of-responsibility request pipeline.

Every outbound call made by a service client funnels through a
:class:`Pipeline`: an ordered list of :class:`Policy` objects terminated by a
transport policy that performs the network I/O.

Design:
- **Single capability**: a policy implements ``send(request, next_policy)``.
  It may mutate the request, call ``next_policy(request)`` zero or more times,
  inspect or replace the response, or raise.
- **Short-circuit**: a policy that returns without calling ``next_policy``
  stops the chain; downstream policies and the transport never run.
- **Re-entrant continuations**: ``next_policy`` may be invoked repeatedly
  (the retry policy does this once per attempt).
- **Stateless per request**: the pipeline holds no per-request state, so one
  instance serves concurrent callers. Per-request metadata travels in
  ``request.extensions``.

Example:
    >>> import httpx
    >>> from AdoRest.Core.pipeline import Pipeline
    >>> from AdoRest.Core.transport import TransportPolicy
    >>> pipeline = Pipeline([], TransportPolicy())
    >>> response = pipeline.send(httpx.Request("GET", "https://dev.azure.com/org/_apis/projects"))
"""

from __future__ import annotations

import abc
import logging
from typing import Iterator, Optional, Sequence

import httpx

logger = logging.getLogger(__name__)


class Policy(abc.ABC):
    """One link of the request pipeline."""

    @abc.abstractmethod
    def send(self, request: httpx.Request, next_policy: "NextPolicy") -> httpx.Response:
        """Process ``request`` and return a response.

        Args:
            request: Mutable outbound request.
            next_policy: Continuation invoking the rest of the chain.

        Returns:
            The response to hand back to the upstream policy.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class NextPolicy:
    """Continuation bound to the policy at ``index`` of a pipeline."""

    __slots__ = ("_pipeline", "_index")

    def __init__(self, pipeline: "Pipeline", index: int) -> None:
        self._pipeline = pipeline
        self._index = index

    def __call__(self, request: httpx.Request) -> httpx.Response:
        return self._pipeline._invoke(self._index, request)

    @property
    def index(self) -> int:
        """Position of the policy this continuation will run."""
        return self._index


class Pipeline:
    """Ordered policies terminated by a transport policy.

    Attributes:
        policies: Policies run in order before the transport.
        transport: Terminal policy performing network I/O. It receives a
            continuation that raises if called, since nothing follows it.
    """

    def __init__(self, policies: Sequence[Policy], transport: Policy) -> None:
        self._policies: tuple[Policy, ...] = tuple(policies)
        self._transport = transport

    @property
    def policies(self) -> tuple[Policy, ...]:
        return self._policies

    @property
    def transport(self) -> Policy:
        return self._transport

    def __iter__(self) -> Iterator[Policy]:
        yield from self._policies
        yield self._transport

    def __len__(self) -> int:
        return len(self._policies) + 1

    def send(self, request: httpx.Request) -> httpx.Response:
        """Run ``request`` through every policy and the transport."""

        return self._invoke(0, request)

    def _invoke(self, index: int, request: httpx.Request) -> httpx.Response:
        if index < len(self._policies):
            policy = self._policies[index]
            return policy.send(request, NextPolicy(self, index + 1))
        if index == len(self._policies):
            return self._transport.send(request, NextPolicy(self, index + 1))
        raise RuntimeError("transport policy must not call next_policy")

    def with_policies(
        self,
        *,
        prepend: Optional[Sequence[Policy]] = None,
        append: Optional[Sequence[Policy]] = None,
    ) -> "Pipeline":
        """Return a copy with extra policies around the existing ones."""

        return Pipeline(
            [*(prepend or ()), *self._policies, *(append or ())],
            self._transport,
        )

    def __repr__(self) -> str:
        names = ", ".join(type(policy).__name__ for policy in self)
        return f"Pipeline([{names}])"


__all__ = ["Policy", "NextPolicy", "Pipeline"]
