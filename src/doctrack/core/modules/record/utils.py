REMARK_CHANNELS = ("Email", "Viber", "Hard Copy")


def normalize_remarks(
    remarks: str | None, email: bool = False, viber: bool = False, hard_copy: bool = False
) -> str | None:
    """Join the selected delivery channels into the remarks text.

    When no channel flag is set, free-form remarks are kept as given.
    """
    selected = [channel for channel, flag in zip(REMARK_CHANNELS, (email, viber, hard_copy), strict=True) if flag]
    if not selected:
        return remarks
    return " / ".join(selected)
