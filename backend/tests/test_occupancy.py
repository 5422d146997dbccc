from app.services.occupancy import OccupancyIndex


def test_reserve_marks_every_resource_for_every_slot():
    index = OccupancyIndex()
    index.reserve(
        teacher_id="t1",
        group_ids=["g1", "g2"],
        room_id="r1",
        day="monday",
        start_slot_index=1,
        slot_count=2,
        subject_id="s1",
    )

    # teacher + two groups + room, over two slots
    assert len(index) == 8
    assert ("group", "g2", "monday", 2) in index
    assert not index.is_free("teacher", "t1", "monday", 1)
    assert index.is_free("teacher", "t1", "monday", 0)
    assert index.is_free("room", "r1", "tuesday", 1)
    assert not index.range_is_free("room", "r1", "monday", 0, 2)
    assert index.range_is_free("room", "r1", "monday", 3, 2)


def test_day_usage_counts_placements_per_subject():
    index = OccupancyIndex()
    for slot in (0, 3):
        index.reserve(
            teacher_id="t1",
            group_ids=["g1"],
            room_id="r1",
            day="friday",
            start_slot_index=slot,
            slot_count=1,
            subject_id="s1",
        )

    assert index.placements_on("s1", "friday") == 2
    assert index.placements_on("s1", "monday") == 0
    assert index.placements_on("other", "friday") == 0
