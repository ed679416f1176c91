"""

X32 mic-live bridge

- Transport: a bound UDP endpoint. There is no connection; the console address is given on each send.
- Subscription: the console streams a parameter for a limited time after it receives
  `/subscribe <path> <time factor>`. The listener renews every subscription on a fixed cadence.
- Decoding: datagrams are OSC messages or bundles. Bundles are flattened depth-first into messages.
- Tracking: mute (`/ch/NN/mix/on`) and fader (`/ch/NN/mix/fader`) values per channel. Applying a message
  reports whether anything visible changed.
- Emission: each change fires a Snapshot to the subscribers of the controller's EventSource. A channel is
  live when it is switched on and its fader is above the threshold.


## Threading

The listener loop runs on its own daemon thread and owns the transport and the channel tracker.
Nothing else touches them while it runs.

The controller's start()/stop() run on the caller's thread. They only signal the loop's stop event and
join the thread. A single lock guards the stored loop, so at most one loop exists at any time. start()
joins the previous loop before it spawns a new one.

The receive timeout (250ms) bounds how long the loop takes to notice that it has been stopped.

Snapshots are fired on the listener thread. Hosts that want them on their own thread can register a
QueuedEventSource and call publish() from there.


## Playout

The casparcg package holds a small synchronous AMCP client, plus a writer for template files kept
under a template root. Neither one shares state with the listener.

"""
