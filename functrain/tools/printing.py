def round_info(msg: str) -> None:
    print(f"[Round] {msg}")
    return


def dmrg_info(msg: str) -> None:
    print(f"[DMRG] {msg}")
    return


def adapt_info(msg: str) -> None:
    print(f"[Adapt] {msg}")
    return
