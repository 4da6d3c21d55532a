from __future__ import annotations

import logging
from pathlib import Path

import pytest

from proofparams.cids import lookup_entry, params_cid, verifying_key_cid
from proofparams.errors import MissingParameters, RegistryErrorCode
from proofparams.paths import cache_params_path, cache_verifying_key_path
from proofparams.registry import RegisteredPoStProof, RegisteredSealProof, all_proofs
from proofparams.tables import RegistryContext
from proofparams.tests import fake_cid, full_context
from proofparams.types import ParameterEntry, ParameterKind


@pytest.fixture()
def ctx(tmp_path: Path) -> RegistryContext:
    # tmp_path/"cache" is never created: path resolution must not need it.
    return full_context(cache_dir=tmp_path / "cache")


# ---------- paths ----------


def test_paths_live_under_cache_root(ctx: RegistryContext) -> None:
    for proof in all_proofs():
        ident = proof.circuit_identifier(ctx)
        vk = proof.cache_path_for_verifying_key(ctx)
        params = proof.cache_path_for_parameters(ctx)

        assert vk.parent == ctx.cache_dir
        assert params.parent == ctx.cache_dir
        assert vk.name == f"{ident}.vk"
        assert params.name == f"{ident}.params"
        assert vk != params
    assert not ctx.cache_dir.exists()


def test_paths_follow_cache_root(ctx: RegistryContext, tmp_path: Path) -> None:
    proof = RegisteredSealProof.STACKED_DRG_16MIB_V1
    other = RegistryContext.build(partitions=ctx.partitions, cache_dir=tmp_path / "elsewhere")
    assert proof.cache_path_for_parameters(other).name == proof.cache_path_for_parameters(ctx).name
    assert proof.cache_path_for_parameters(other).parent == tmp_path / "elsewhere"


def test_config_level_path_helpers(ctx: RegistryContext) -> None:
    proof = RegisteredPoStProof.STACKED_DRG_1GIB_V1
    cfg = proof.to_config()
    assert cache_params_path(cfg, ctx.cache_dir) == proof.cache_path_for_parameters(ctx)
    assert cache_verifying_key_path(cfg, str(ctx.cache_dir)) == proof.cache_path_for_verifying_key(ctx)


# ---------- content ids ----------


def test_content_ids_resolve_from_parameter_table(ctx: RegistryContext) -> None:
    for proof in all_proofs():
        ident = proof.circuit_identifier(ctx)
        assert proof.parameters_content_id(ctx) == fake_cid(f"{ident}.params")
        assert proof.verifying_key_content_id(ctx) == fake_cid(f"{ident}.vk")


def test_removed_vk_entry_is_missing_parameters(ctx: RegistryContext) -> None:
    proof = RegisteredSealProof.STACKED_DRG_1KIB_V1
    ident = proof.circuit_identifier(ctx)
    trimmed = ctx.with_parameters(ctx.parameters.without(f"{ident}.vk"))

    with pytest.raises(MissingParameters) as ei:
        proof.verifying_key_content_id(trimmed)
    err = ei.value
    assert err.identifier == ident
    assert err.kind is ParameterKind.VERIFYING_KEY
    assert err.key == f"{ident}.vk"
    assert err.retryable is True
    assert err.code == RegistryErrorCode.MISSING_PARAMETERS
    assert err.to_dict()["ctx"] == {"identifier": ident, "kind": "vk", "key": f"{ident}.vk"}

    # The params entry for the same identifier still resolves.
    assert proof.parameters_content_id(trimmed) == fake_cid(f"{ident}.params")
    # Other variants are untouched.
    assert RegisteredPoStProof.STACKED_DRG_1KIB_V1.verifying_key_content_id(trimmed)


def test_missing_entry_is_recoverable_after_publish(ctx: RegistryContext) -> None:
    proof = RegisteredPoStProof.STACKED_DRG_32GIB_V1
    ident = proof.circuit_identifier(ctx)
    key = f"{ident}.params"
    empty = ctx.with_parameters({})

    with pytest.raises(MissingParameters):
        proof.parameters_content_id(empty)

    published = empty.with_parameters(empty.parameters.merged({key: "bafy-published"}))
    assert proof.parameters_content_id(published) == "bafy-published"


def test_lookup_logs_a_warning_on_miss(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="proofparams.cids"):
        with pytest.raises(MissingParameters):
            lookup_entry("v1-proof-of-spacetime-00", ParameterKind.VERIFYING_KEY, {})
    rec = next(r for r in caplog.records if r.name == "proofparams.cids")
    assert rec.levelno == logging.WARNING
    assert rec.identifier == "v1-proof-of-spacetime-00"
    assert rec.key == "v1-proof-of-spacetime-00.vk"


def test_config_level_cid_helpers(ctx: RegistryContext) -> None:
    proof = RegisteredSealProof.STACKED_DRG_256MIB_V1
    cfg = proof.to_config(ctx)
    assert params_cid(cfg, ctx.parameters) == proof.parameters_content_id(ctx)
    assert verifying_key_cid(cfg, ctx.parameters) == proof.verifying_key_content_id(ctx)

    entry = lookup_entry(proof.circuit_identifier(ctx), ParameterKind.PARAMETERS, ctx.parameters)
    assert isinstance(entry, ParameterEntry)
    assert entry.digest


def test_path_and_cid_operations_require_context() -> None:
    proof = RegisteredPoStProof.STACKED_DRG_1KIB_V1
    with pytest.raises(TypeError):
        proof.cache_path_for_parameters(None)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        proof.parameters_content_id(None)  # type: ignore[arg-type]
