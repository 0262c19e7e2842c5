import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt


def draw_schedule(topology, schedule_time, file_name=None):
    '''
    Gantt chart of the schedule, one row per clique (stand-alone links at the bottom), one bar per buffered interval.
    Bars are coloured by flow.
    The figure is closed once saved to file_name; otherwise closing it is up to the caller.
    '''
    rows = [("clique {} (sta {})".format(c.clique_id, c.conflict_node), c) for c in topology.real_cliques()]
    rows += [("interference {}".format(c.clique_id), c) for c in topology.interference_cliques()]
    rows += [("link {}-{}".format(*c.members), c) for c in topology.standalone]

    cmap = plt.get_cmap('tab10')
    fig, ax = plt.subplots(figsize=(12, 1 + 0.5 * len(rows)))

    for r, (_, clique) in enumerate(rows):
        for i, (f, n_s, n_d) in enumerate(clique.segments):
            bars = clique.buffered[i]
            if len(bars) == 0:
                continue
            ax.broken_barh(bars, (r - 0.4, 0.8), facecolors=cmap(f % 10),
                           alpha=0.5 if clique.reused[i] else 1.0)
            for start, dur in bars:
                ax.text(start + dur / 2, r, "{}>{}".format(n_s, n_d), ha='center', va='center', fontsize=7)

    ax.set_yticks(range(len(rows)))
    ax.set_yticklabels([label for label, _ in rows])
    ax.set_xlim(0, schedule_time)
    ax.set_xlabel("Time (ns)")
    ax.invert_yaxis()
    plt.tight_layout()

    if file_name is not None:
        fig.savefig(file_name, dpi=300, bbox_inches='tight')
        plt.close(fig)
    return fig
