from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from proofparams.errors import MissingParameters
from proofparams.registry import RegisteredSealProof, all_proofs
from proofparams.tests import full_context


def _resolve_all(ctx):
    return [
        (
            p.circuit_identifier(ctx),
            str(p.cache_path_for_parameters(ctx)),
            p.parameters_content_id(ctx),
            p.verifying_key_content_id(ctx),
        )
        for p in all_proofs()
    ]


def test_shared_context_across_threads() -> None:
    ctx = full_context()
    expected = _resolve_all(ctx)
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: _resolve_all(ctx), range(64)))
    assert all(r == expected for r in results)


def test_contexts_do_not_leak_between_threads() -> None:
    full = full_context()
    proof = RegisteredSealProof.STACKED_DRG_1KIB_V1
    ident = proof.circuit_identifier(full)
    trimmed = full.with_parameters(full.parameters.without(f"{ident}.vk"))

    def work(i: int) -> str:
        ctx = trimmed if i % 2 else full
        try:
            return proof.verifying_key_content_id(ctx)
        except MissingParameters:
            return "missing"

    with ThreadPoolExecutor(max_workers=8) as pool:
        out = list(pool.map(work, range(200)))
    assert out[1::2] == ["missing"] * 100
    assert set(out[0::2]) == {proof.verifying_key_content_id(full)}
