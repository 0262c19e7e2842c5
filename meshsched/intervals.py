'''
Interval arithmetic on lists of [start, stop) gaps.

Available time is kept as a sorted list of disjoint (start, stop) tuples,
allocations as (start, duration) tuples.
'''


def to_start_stop(buffered):
    return [(start, start + dur) for start, dur in buffered]


def remove_interval_from_available(to_remove, avai_time):
    '''
    Remove every [start, stop) of 'to_remove' from 'avai_time'
    - removal over the front of a gap shortens it from the front
    - removal over the back of a gap shortens it from the back
    - removal strictly inside a gap splits it in two
    - removal covering the whole gap drops it
    '''
    avai_time = [[start, stop] for start, stop in avai_time]

    for avoid_start, avoid_stop in to_remove:
        slot = 0
        while slot < len(avai_time):
            start, stop = avai_time[slot]

            if avoid_start <= start and start <= avoid_stop <= stop:
                avai_time[slot][0] = avoid_stop
            elif start <= avoid_start <= stop and avoid_stop >= stop:
                avai_time[slot][1] = avoid_start
            elif start < avoid_start and avoid_stop < stop:
                avai_time[slot][1] = avoid_start
                avai_time.insert(slot + 1, [avoid_stop, stop])
                # the new gap lies after the removed interval
                slot += 1
            elif avoid_start < start and avoid_stop > stop:
                avai_time[slot][1] = start

            slot += 1

    return [(start, stop) for start, stop in avai_time if stop > start]


def get_available_time(busy, schedule_time):
    '''
    Complement of the busy [start, stop) intervals within [0, schedule_time)
    '''
    return remove_interval_from_available(sorted(busy), [(0, schedule_time)])


def first_fit_then_slice(time_needed, avai_time):
    '''
    Firstly try to fit in any gap without chopping; if no single gap is large enough,
    fill the gaps sequentially from the first one until all the time needed has been placed.

    @output placed, a list of (start, duration)
    @output residual, the time that could not be placed
    '''
    if time_needed <= 0:
        return [], 0

    for start, stop in avai_time:
        if time_needed <= stop - start:
            return [(start, time_needed)], 0

    placed = []
    for start, stop in avai_time:
        if stop == start:
            continue
        dur = min(time_needed, stop - start)
        placed.append((start, dur))
        time_needed -= dur
        if time_needed == 0:
            break

    return placed, time_needed
